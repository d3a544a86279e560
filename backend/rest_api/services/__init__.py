"""
Services module for business logic.

- domain/: Application services used by the routers and the CLI

Usage:
    from rest_api.services.domain import OrderService
    service = OrderService(db, hub)
    created = await service.create_order(body)
"""
