from ..schemas import User
from .base import BaseService, service_call


class ProfileService(BaseService):
    """Profile of the user the configured token belongs to"""

    @service_call("Failed to load user profile")
    def get_profile(self) -> User:
        response = self.client.get("/api/auth/profile")
        return User.model_validate(response["user"])
