"""Domain layer - core borrowing logic and interfaces.

This layer contains:
- Domain entities (borrowing transactions, gateway value objects)
- Domain exceptions
- Store interfaces (Repository Pattern)
- Gateway interfaces (Adapter Pattern)
"""
