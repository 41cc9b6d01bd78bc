"""Service package - business logic layer.

Services call repositories for database work, shape responses with
``_to_response`` and may call other services for cross-domain effects
(e.g. order status changes updating analytics and notifications).
"""
