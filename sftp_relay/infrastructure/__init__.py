"""
Infrastructure layer: configuration, logging, proxy and client layers.
"""
