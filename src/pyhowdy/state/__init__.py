"""Shared state layer.

Process-wide namespaced key/value stores with serialized writes and
change notification fan-out. Views never poll: they subscribe, re-read
the store on every change event, and re-derive whatever they display.
"""
