"""WhatsApp Webhook - receives WhatsApp Cloud API events and sends automated replies."""

__version__ = "0.1.0"
