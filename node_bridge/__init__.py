"""
Node Service Bridge

Two processes talking plain HTTP:
- Bridge Client (CMS side) - ``node_bridge.client``
- Bridge Service (companion) - ``node_bridge.service``, port 3000 by default

Run the companion service:
    uvicorn node_bridge.service.main:app --port 3000
"""
__version__ = "1.0.0"
