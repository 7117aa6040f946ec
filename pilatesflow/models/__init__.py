from pilatesflow.models.orm_models import Base, Profile, StudioClass, Booking, ClassProgress

__all__ = ["Base", "Profile", "StudioClass", "Booking", "ClassProgress"]
