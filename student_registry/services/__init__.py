# Services package init
"""
Student Registry — Services Layer
==================================

Service Inventory:
    - StudentService: one SQL statement per record operation, plus translation
      of empty results and storage failures into application exceptions
"""
