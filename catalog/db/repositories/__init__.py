from catalog.db.repositories.entity_types import EntityTypeRepository
from catalog.db.repositories.entities import EntityRepository
from catalog.db.repositories.users import UserRepository
from catalog.db.repositories.one_time_codes import OneTimeCodeRepository

__all__ = ['EntityTypeRepository', 'EntityRepository', 'UserRepository', 'OneTimeCodeRepository']
