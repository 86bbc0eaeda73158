"""
CLMM 설정

환경 변수(.env 포함)에서 설정을 로드합니다.
"""
import os
from fractions import Fraction

from dotenv import load_dotenv

from .constants import MIN_LIQUIDITY

# Load environment variables from .env file
load_dotenv()


class Settings:
    """CLMM settings"""

    # 풀 생성 시 최소 시드 유동성 (PoolState.create)
    MIN_SEED_LIQUIDITY: int = int(os.getenv("CLMM_MIN_SEED_LIQUIDITY", MIN_LIQUIDITY))

    # 슬리피지 허용치 기본값 (문자열 그대로 Fraction으로 파싱, float 경유 없음)
    DEFAULT_SLIPPAGE_TOLERANCE: Fraction = Fraction(
        os.getenv("CLMM_DEFAULT_SLIPPAGE_TOLERANCE", "0.005")
    )


# Create global settings instance
settings = Settings()
