"""
notifications — Multi-channel notification delivery core.

Sub-modules:
    models          — Request, Recipient, Content, Result and enums shared by all channels
    channel_config  — Per-channel provider configuration (pydantic models)
    channels/       — Email, SMS and Push channel implementations
    registry        — Channel-type → provider/config mapping and channel factory
    dispatcher      — Pick the first channel that supports a request and send it
"""
