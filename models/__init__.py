from models.user import User, UserRole, Role
from models.auth_token import AuthToken
from models.franchise import Franchise, Store
from models.menu import MenuItem
from models.order import Order, OrderItem

# Register all models
__all__ = ['User', 'UserRole', 'Role', 'AuthToken', 'Franchise', 'Store', 'MenuItem', 'Order', 'OrderItem']
