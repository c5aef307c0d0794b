#import wszystkich modeli zeby SQLAlchemy je zarejestrowal w base metadata

from wholesale.data.models.category import CategoryModel
from wholesale.data.models.product import ProductModel
from wholesale.data.models.order import OrderModel
from wholesale.data.models.tracking_info import TrackingInfoModel
from wholesale.data.models.pricing import PricingTierModel, ProductPriceModel, UserPricingTierModel
from wholesale.data.models.shipping_address import ShippingAddressModel
from wholesale.data.models.shop_settings import ShopSettingsModel

__all__ = [
    "CategoryModel",
    "ProductModel",
    "OrderModel",
    "TrackingInfoModel",
    "PricingTierModel",
    "ProductPriceModel",
    "UserPricingTierModel",
    "ShippingAddressModel",
    "ShopSettingsModel",
]
