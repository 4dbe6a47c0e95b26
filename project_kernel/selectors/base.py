"""
Module: project_kernel.selectors.base
Responsibility: Common base for read-only selectors.

Selectors run SELECTs on a Session owned by the caller and return domain
values (``ProjectTargets``, Decimals, booleans), never ORM instances.  They
do not add, flush, commit or delete.
"""

from sqlalchemy.orm import Session


class BaseSelector:
    def __init__(self, session: Session):
        self.session = session
