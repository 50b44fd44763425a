"""Network Bounded Context.

Responsible for the tower/link network of a planning session:
- Entities: Tower, Link
- Value Objects: Selection, TowerUpdate
- Aggregate: NetworkModel (CRUD with consistency invariants)
"""
