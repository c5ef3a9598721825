"""Version metadata for Dress Rental Manager."""

__app_name__ = "Dress Rental Manager"
__company__ = "Dress Rental"
__version__ = "1.0.0"
