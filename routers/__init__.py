# routers/__init__.py
from .ambassadors import router as ambassadors_router
from .link import router as link_router
from .contracts import router as contracts_router
from .payouts import router as payouts_router

__all__ = [
     "ambassadors_router",
     "link_router",
     "contracts_router",
     "payouts_router",
]
