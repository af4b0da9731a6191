# storefront/api/deps.py
from fastapi import Depends
from storefront.db.mongo import get_db, get_db_or_none, get_bucket
from storefront.db.redis import get_redis
from storefront.domain.repositories.product_repo import ProductRepo
from storefront.domain.repositories.category_repo import CategoryRepo
from storefront.domain.repositories.user_repo import UserRepo
from storefront.domain.repositories.order_repo import OrderRepo
from storefront.domain.repositories.object_store_repo import ObjectStoreRepo

# MongoDB database; raises StoreUnavailable (-> 503) when not connected
async def mongo_db(db = Depends(get_db)):
    return db

# Redis client or None
def redis_dep():
    return get_redis()

# --- Repositories (overridden with in-memory fakes in tests) ---

def product_repo_dep(db = Depends(mongo_db)) -> ProductRepo:
    return ProductRepo(db)

def category_repo_dep(db = Depends(mongo_db)) -> CategoryRepo:
    return CategoryRepo(db)

def object_store_dep(db = Depends(mongo_db)) -> ObjectStoreRepo:
    return ObjectStoreRepo(get_bucket(db))

def user_repo_dep() -> UserRepo:
    return UserRepo(get_db())

# Login and stats must not fail loudly when the store is missing: they get None instead.

def user_repo_optional() -> UserRepo | None:
    db = get_db_or_none()
    return UserRepo(db) if db is not None else None

def order_repo_optional() -> OrderRepo | None:
    db = get_db_or_none()
    return OrderRepo(db) if db is not None else None
