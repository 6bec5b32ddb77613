from fastapi import APIRouter
from splitledger.api.v1.endpoints import analytics, auth, expenses, friends, groups, settlements, users, wallet

api_router = APIRouter()

api_router.include_router(auth.router, prefix="/auth", tags=["auth"])
api_router.include_router(users.router, prefix="/users", tags=["users"])
api_router.include_router(groups.router, prefix="/groups", tags=["groups"])
api_router.include_router(expenses.router, prefix="/expenses", tags=["expenses"])
api_router.include_router(settlements.router, prefix="/settlements", tags=["settlements"])
api_router.include_router(wallet.router, prefix="/wallet", tags=["wallet"])
api_router.include_router(analytics.router, prefix="/analytics", tags=["analytics"])
api_router.include_router(friends.router, prefix="/friends", tags=["friends"])
