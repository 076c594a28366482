"""Metaso tool pipelines.

Each tool runs Validator -> Safety Filter -> Payload Builder ->
HTTP Client -> Response Formatter. The :class:`ToolDispatcher` routes
calls by name and turns every outcome into a :class:`ToolResponse`.
"""
