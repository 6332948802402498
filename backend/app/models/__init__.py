from app.models.user import User
from app.models.company import Company, CompanySize
from app.models.product import Product, RiskLevel
from app.models.supplier import Supplier, SupplierStatus
from app.models.shipment import Shipment, ShipmentStatus, ShippingMethod
from app.models.factory import Factory
from app.models.warehouse import Warehouse
from app.models.retailer import Retailer
from app.models.upload_log import UploadLog

__all__ = [
    "User",
    "Company",
    "CompanySize",
    "Product",
    "RiskLevel",
    "Supplier",
    "SupplierStatus",
    "Shipment",
    "ShipmentStatus",
    "ShippingMethod",
    "Factory",
    "Warehouse",
    "Retailer",
    "UploadLog",
]
