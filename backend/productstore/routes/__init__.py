# Routes package init
"""
Product Store — API Routes Package
===================================

Route Inventory:
    - products.py:  GET/POST       /products
                    GET/PUT/DELETE /products/{id}
    - health.py:    GET            /health

Routes stay thin: read the request, call ProductService, write the response.
"""
