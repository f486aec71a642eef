"""Delivery module."""

from .webhook_client import IWebhookClient, WebhookClient
from .worker import DeliveryWorker, ItemOutcome, WorkerStats

__all__ = [
    "DeliveryWorker",
    "ItemOutcome",
    "WorkerStats",
    "IWebhookClient",
    "WebhookClient",
]
