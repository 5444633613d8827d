from pydantic import BaseModel
from typing import List
import os

class Settings(BaseModel):
    # Storage
    DATA_FILE: str = os.getenv('DATA_FILE', 'data/db.json')

    # Auth/JWT
    JWT_SECRET: str = os.getenv('JWT_SECRET', 'please-change-this-secret')
    JWT_ALGORITHM: str = os.getenv('JWT_ALGORITHM', 'HS256')
    TOKEN_EXPIRES_DAYS: int = int(os.getenv('TOKEN_EXPIRES_DAYS', '7'))
    BCRYPT_ROUNDS: int = int(os.getenv('BCRYPT_ROUNDS', '10'))
    # Off keeps the public demo behaviour of the advance endpoint
    REQUIRE_OWNER_FOR_ADVANCE: bool = os.getenv('REQUIRE_OWNER_FOR_ADVANCE', 'false').lower() == 'true'

    # HTTP
    API_PREFIX: str = os.getenv('API_PREFIX', '/api')
    CORS_ORIGINS: str = os.getenv('CORS_ORIGINS', '*')
    METRICS_ENABLED: bool = os.getenv('METRICS_ENABLED', 'true').lower() == 'true'
    HOST: str = os.getenv('HOST', '0.0.0.0')
    PORT: int = int(os.getenv('PORT', '4000'))

    LOG_LEVEL: str = os.getenv('LOG_LEVEL', 'INFO')

    @property
    def cors_origin_list(self) -> List[str]:
        return [o.strip() for o in self.CORS_ORIGINS.split(',') if o.strip()]

settings = Settings()
