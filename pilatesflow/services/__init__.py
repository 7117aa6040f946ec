# PilatesFlow record stores
from pilatesflow.services.class_catalog_service import ClassCatalogService
from pilatesflow.services.booking_service import BookingService, BookingToggleResult
from pilatesflow.services.progress_service import ProgressService, ProgressToggleResult
from pilatesflow.services.profile_service import ProfileService
from pilatesflow.services.auth_service import AuthProviderClient

__all__ = [
    'ClassCatalogService',
    'BookingService',
    'BookingToggleResult',
    'ProgressService',
    'ProgressToggleResult',
    'ProfileService',
    'AuthProviderClient',
]
