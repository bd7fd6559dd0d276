"""Webhook adapters - Automation forwarding."""

from .forwarder import WebhookRecordForwarder

__all__ = ["WebhookRecordForwarder"]
