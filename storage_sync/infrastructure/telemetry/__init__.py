"""
Observability sinks implementing the ObservabilitySink port.
"""
