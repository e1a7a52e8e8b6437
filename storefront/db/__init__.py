# storefront/db/__init__.py

# Import Base from base_class, making it accessible via storefront.db.Base
from .base_class import Base

# Import all ORM models so they are registered with SQLAlchemy's metadata
from .models import CategoryOrm
from .models import BrandOrm
from .models import ProductOrm
from .models import MessageOrm
from .models import SiteSettingOrm
from .models import ImageOrm
from .models import AdminUserOrm
