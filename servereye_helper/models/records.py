"""Flat output records assembled from cached Server-Eye entities."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any


@dataclass
class SensorRecord:
    name: str
    sensor_type: str
    sensor_id: str
    interval: int | None
    error: bool | None
    message: str
    last_date: str | None
    has_notification: bool | str
    sensorhub: str
    sensorhub_id: str
    connector: str
    connector_id: str
    customer: str
    customer_id: str

    def as_dict(self) -> dict[str, Any]:
        return {
            "Name": self.name,
            "SensorType": self.sensor_type,
            "SensorId": self.sensor_id,
            "Interval": self.interval,
            "Error": self.error,
            "Message": self.message,
            "LastDate": self.last_date,
            "HasNotification": self.has_notification,
            "Sensorhub": self.sensorhub,
            "SensorhubId": self.sensorhub_id,
            "Connector": self.connector,
            "ConnectorId": self.connector_id,
            "Customer": self.customer,
            "CustomerId": self.customer_id,
        }


@dataclass
class NotificationRecord:
    notification_id: str
    name: str
    email: str
    via_mail: bool
    via_phone: bool
    via_ticket: bool
    defer_time: str
    node_name: str
    node_id: str
    node_kind: str
    message: str
    sensorhub: str
    customer: str

    def as_dict(self) -> dict[str, Any]:
        return {
            "NotificationId": self.notification_id,
            "Name": self.name,
            "Email": self.email,
            "Mail": self.via_mail,
            "Phone": self.via_phone,
            "Ticket": self.via_ticket,
            "DeferTime": self.defer_time,
            "SensorName": self.node_name,
            "SensorId": self.node_id,
            "Kind": self.node_kind,
            "Message": self.message,
            "Sensorhub": self.sensorhub,
            "Customer": self.customer,
        }


@dataclass
class SensorhubRecord:
    name: str
    sensorhub_id: str
    connector: str
    connector_id: str
    customer: str
    customer_id: str
    hostname: str
    os_name: str
    last_boot: str | None

    def as_dict(self) -> dict[str, Any]:
        return {
            "Name": self.name,
            "SensorhubId": self.sensorhub_id,
            "Connector": self.connector,
            "ConnectorId": self.connector_id,
            "Customer": self.customer,
            "CustomerId": self.customer_id,
            "Hostname": self.hostname,
            "OsName": self.os_name,
            "LastBootUpTime": self.last_boot,
        }


@dataclass
class CustomerRecord:
    name: str
    customer_id: str
    customer_number: str

    def as_dict(self) -> dict[str, Any]:
        return {
            "Name": self.name,
            "CustomerId": self.customer_id,
            "CustomerNumber": self.customer_number,
        }
