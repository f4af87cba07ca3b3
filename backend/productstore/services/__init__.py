# Services package init
"""
Product Store — Services Layer
===============================

Service Inventory:
    - ProductService: list, get, create, replace and delete over a StoreSession
"""
