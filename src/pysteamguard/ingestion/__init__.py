"""Ingestion layer.

Adapters that turn raw remote payloads (device page markup, device
records) into canonical models.  No other package may depend on the raw
markup shape.
"""

__all__: list[str] = []
