"""Server-Eye lookups that assemble flat records from cached entities.

These functions are synchronous; bot handlers run them in threads.
"""

from __future__ import annotations

import logging
from typing import Any

from .api import NODE_TYPE_AGENT, NODE_TYPE_SENSORHUB, ServerEyeClient
from .auth import Credential, resolve_auth
from .cache import EntityCache
from .errors import ConfigError, NotFound, PermissionDenied
from .filters import MessageFilter, apply_filter
from .models.records import (
    CustomerRecord,
    NotificationRecord,
    SensorhubRecord,
    SensorRecord,
)

logger = logging.getLogger(__name__)

NO_NOTIFICATION_PERMISSION = "No permission to view notifications"
NO_DISPATCH_PERMISSION = "No permission to view dispatch times"

Entity = dict[str, Any]


def _id(entity: Entity, *keys: str) -> str:
    for key in keys:
        value = entity.get(key)
        if value:
            return str(value)
    return ""


def _container_chain(
    cache: EntityCache, container_id: str, auth: Credential
) -> tuple[Entity, Entity, Entity]:
    """Return (sensorhub, connector, customer) for a container id.

    Sensors can live directly on a connector; then the connector doubles as
    the sensorhub.
    """
    hub = cache.container(container_id, auth)
    parent_id = _id(hub, "parentId")
    connector = cache.container(parent_id, auth) if parent_id else hub
    customer_id = _id(connector, "customerId") or _id(hub, "customerId")
    if not customer_id:
        raise NotFound(f"container {container_id} has no customer")
    customer = cache.customer(customer_id, auth)
    return hub, connector, customer


def resolve_chain(
    cache: EntityCache, agent_id: str, auth: Credential | None = None
) -> tuple[Entity, Entity, Entity, Entity]:
    """Resolve sensor -> sensorhub -> connector -> customer via the cache."""
    auth = resolve_auth(auth)
    agent = cache.agent(agent_id, auth)
    parent_id = _id(agent, "parentId")
    if not parent_id:
        raise NotFound(f"sensor {agent_id} has no sensorhub")
    hub, connector, customer = _container_chain(cache, parent_id, auth)
    return agent, hub, connector, customer


def _has_notification(
    client: ServerEyeClient, agent_id: str, auth: Credential
) -> bool | str:
    try:
        return bool(client.list_agent_notifications(agent_id, auth))
    except PermissionDenied:
        logger.debug("no permission for notifications of sensor %s", agent_id)
        return NO_NOTIFICATION_PERMISSION


def _state_fields(state: Entity | None) -> tuple[bool | None, str | None, str | None]:
    if not state:
        return None, None, None
    error = bool(state["state"]) if "state" in state else None
    return error, state.get("message"), state.get("lastDate") or state.get("date")


def _sensor_record(
    client: ServerEyeClient,
    cache: EntityCache,
    agent: Entity,
    message_filter: MessageFilter | None,
    auth: Credential,
) -> SensorRecord:
    agent_id = _id(agent, "aId", "id")
    parent_id = _id(agent, "parentId")
    if not parent_id:
        raise NotFound(f"sensor {agent_id} has no sensorhub")
    hub, connector, customer = _container_chain(cache, parent_id, auth)
    error, message, last_date = _state_fields(client.agent_state(agent_id, auth))
    return SensorRecord(
        name=agent.get("name", ""),
        sensor_type=str(agent.get("type") or ""),
        sensor_id=agent_id,
        interval=agent.get("interval"),
        error=error,
        message=apply_filter(message, message_filter),
        last_date=last_date,
        has_notification=_has_notification(client, agent_id, auth),
        sensorhub=hub.get("name", ""),
        sensorhub_id=_id(hub, "cId", "id"),
        connector=connector.get("name", ""),
        connector_id=_id(connector, "cId", "id"),
        customer=customer.get("companyName", ""),
        customer_id=_id(customer, "cId", "id"),
    )


def _account_nodes(
    client: ServerEyeClient, auth: Credential, node_type: int
) -> list[Entity]:
    return [n for n in client.list_nodes(auth) if n.get("type") == node_type]


def _account_agents(
    client: ServerEyeClient, cache: EntityCache, auth: Credential
) -> list[Entity]:
    return [
        cache.agent(_id(node, "id", "aId"), auth)
        for node in _account_nodes(client, auth, NODE_TYPE_AGENT)
    ]


def get_sensor(
    client: ServerEyeClient,
    cache: EntityCache,
    sensorhub_id: str | None = None,
    sensor_id: str | None = None,
    sensor_type: str | None = None,
    filter: MessageFilter | None = None,
    show_free: bool = False,
    auth: Credential | None = None,
) -> list[SensorRecord]:
    """List sensors with their parent chain and latest (filtered) message.

    Args:
        sensorhub_id: Only sensors of this sensorhub.
        sensor_id: A single sensor. Exclusive with ``sensorhub_id``.
        sensor_type: Agent type to keep (case-insensitive).
        filter: Applied to each sensor's latest state message.
        show_free: Include sensors flagged as free of charge.
        auth: Explicit credential; defaults to the connected session.

    Raises:
        ConfigError: Both ``sensorhub_id`` and ``sensor_id`` were given.
    """
    if sensorhub_id and sensor_id:
        raise ConfigError("sensorhub_id and sensor_id are mutually exclusive")
    auth = resolve_auth(auth)

    if sensor_id:
        agents = [cache.agent(sensor_id, auth)]
    elif sensorhub_id:
        agents = client.list_container_agents(sensorhub_id, auth)
        for agent in agents:
            cache.prime("agent", _id(agent, "aId", "id"), agent, auth)
    else:
        agents = _account_agents(client, cache, auth)

    wanted_type = (sensor_type or "").strip().lower()
    records: list[SensorRecord] = []
    for agent in agents:
        if agent.get("free") and not show_free:
            continue
        if wanted_type and str(agent.get("type") or "").lower() != wanted_type:
            continue
        records.append(_sensor_record(client, cache, agent, filter, auth))
    logger.debug("get_sensor returned %d record(s)", len(records))
    return records


def _defer_time(
    cache: EntityCache, customer_id: str, defer_id: str, auth: Credential
) -> str:
    if not defer_id:
        return ""
    try:
        dispatch_times = cache.dispatch_times(customer_id, auth)
    except PermissionDenied:
        return NO_DISPATCH_PERMISSION
    for entry in dispatch_times:
        if str(entry.get("dtId")) == defer_id:
            return entry.get("name") or defer_id
    return defer_id


def _notification_records(
    cache: EntityCache,
    notifications: list[Entity],
    node: Entity,
    node_kind: str,
    hub: Entity,
    customer: Entity,
    message: str,
    auth: Credential,
) -> list[NotificationRecord]:
    customer_id = _id(customer, "cId", "id")
    records = []
    for note in notifications:
        full_name = f"{note.get('prename') or ''} {note.get('surname') or ''}".strip()
        email = note.get("useremail") or note.get("email") or ""
        records.append(
            NotificationRecord(
                notification_id=_id(note, "nId", "id"),
                name=full_name or email,
                email=email,
                via_mail=bool(note.get("mail")),
                via_phone=bool(note.get("phone")),
                via_ticket=bool(note.get("ticket")),
                defer_time=_defer_time(
                    cache, customer_id, _id(note, "deferId"), auth
                ),
                node_name=node.get("name", ""),
                node_id=_id(node, "aId", "cId", "id"),
                node_kind=node_kind,
                message=message,
                sensorhub=hub.get("name", ""),
                customer=customer.get("companyName", ""),
            )
        )
    return records


def _sensor_notifications(
    client: ServerEyeClient,
    cache: EntityCache,
    agent_id: str,
    message_filter: MessageFilter | None,
    auth: Credential,
) -> list[NotificationRecord]:
    agent, hub, _, customer = resolve_chain(cache, agent_id, auth)
    notifications = client.list_agent_notifications(agent_id, auth)
    if not notifications:
        return []
    _, message, _ = _state_fields(client.agent_state(agent_id, auth))
    return _notification_records(
        cache,
        notifications,
        agent,
        "sensor",
        hub,
        customer,
        apply_filter(message, message_filter),
        auth,
    )


def get_notification(
    client: ServerEyeClient,
    cache: EntityCache,
    sensor_id: str | None = None,
    sensorhub_id: str | None = None,
    filter: MessageFilter | None = None,
    auth: Credential | None = None,
) -> list[NotificationRecord]:
    """List notification entries of a sensor, a sensorhub or the account.

    Without an id every sensor of the account is visited; sensors whose
    notifications the credential may not see are skipped.
    """
    if sensor_id and sensorhub_id:
        raise ConfigError("sensor_id and sensorhub_id are mutually exclusive")
    auth = resolve_auth(auth)

    if sensor_id:
        return _sensor_notifications(client, cache, sensor_id, filter, auth)

    if sensorhub_id:
        hub, _, customer = _container_chain(cache, sensorhub_id, auth)
        notifications = client.list_container_notifications(sensorhub_id, auth)
        if not notifications:
            return []
        _, message, _ = _state_fields(client.container_state(sensorhub_id, auth))
        return _notification_records(
            cache,
            notifications,
            hub,
            "sensorhub",
            hub,
            customer,
            apply_filter(message, filter),
            auth,
        )

    records: list[NotificationRecord] = []
    for agent in _account_agents(client, cache, auth):
        agent_id = _id(agent, "aId", "id")
        try:
            records.extend(
                _sensor_notifications(client, cache, agent_id, filter, auth)
            )
        except PermissionDenied:
            logger.info("skipping sensor %s: no notification permission", agent_id)
    return records


def _sensorhub_record(
    cache: EntityCache, sensorhub_id: str, auth: Credential
) -> SensorhubRecord:
    hub, connector, customer = _container_chain(cache, sensorhub_id, auth)
    return SensorhubRecord(
        name=hub.get("name", ""),
        sensorhub_id=_id(hub, "cId", "id"),
        connector=connector.get("name", ""),
        connector_id=_id(connector, "cId", "id"),
        customer=customer.get("companyName", ""),
        customer_id=_id(customer, "cId", "id"),
        hostname=hub.get("machineName", ""),
        os_name=hub.get("osName", ""),
        last_boot=hub.get("lastBootUpTime"),
    )


def get_sensorhub(
    client: ServerEyeClient,
    cache: EntityCache,
    sensorhub_id: str | None = None,
    customer_id: str | None = None,
    auth: Credential | None = None,
) -> list[SensorhubRecord]:
    if sensorhub_id and customer_id:
        raise ConfigError("sensorhub_id and customer_id are mutually exclusive")
    auth = resolve_auth(auth)
    if sensorhub_id:
        return [_sensorhub_record(cache, sensorhub_id, auth)]
    nodes = _account_nodes(client, auth, NODE_TYPE_SENSORHUB)
    if customer_id:
        nodes = [n for n in nodes if str(n.get("customerId")) == customer_id]
    return [_sensorhub_record(cache, _id(n, "id", "cId"), auth) for n in nodes]


def get_customer(
    cache: EntityCache, customer_id: str, auth: Credential | None = None
) -> CustomerRecord:
    auth = resolve_auth(auth)
    customer = cache.customer(customer_id, auth)
    return CustomerRecord(
        name=customer.get("companyName", ""),
        customer_id=_id(customer, "cId", "id") or customer_id,
        customer_number=str(customer.get("customerNumberExtern") or ""),
    )
