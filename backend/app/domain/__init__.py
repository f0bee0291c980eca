# Domain package init
"""
DogAdopt Backend — Domain Rules
=================================

Pure, storage-agnostic logic:
    - adoption.py:   DogRecord, DogStatus, validation and transition rules
    - pagination.py: page validation and pagination metadata
"""
