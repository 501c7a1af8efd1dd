from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", env_prefix="TAKEOFF_")

    # Geometry tolerance (metres / square metres)
    GEOMETRY_EPSILON: float = 1e-6
    DEFAULT_UNIT_SYSTEM: str = "metric"

    # Trench defaults when width/depth are omitted
    DEFAULT_TRENCH_WIDTH_M: float = 0.6
    DEFAULT_TRENCH_DEPTH_M: float = 0.9

    # HDD defaults: 150 ft minimum bend radius, 8 ft cover
    DEFAULT_MIN_CURVATURE_RADIUS_M: float = 45.72
    DEFAULT_MIN_DEPTH_M: float = 2.44
    DEFAULT_ENTRY_ANGLE_DEGREES: float = 15.0
    DEFAULT_EXIT_ANGLE_DEGREES: float = 15.0
    DEFAULT_DRILL_DIAMETER_MM: float = 152.4       # 6 in pilot
    DEFAULT_BACKREAMER_DIAMETER_MM: float = 182.88  # 7.2 in reamer

    # Hydro-excavation: 2 ft circular section, 3 ft deep
    DEFAULT_HYDRO_DIAMETER_M: float = 0.61
    DEFAULT_HYDRO_DEPTH_M: float = 0.91
    DEFAULT_HYDRO_SECTION_LENGTH_M: float = 1.0

    # Vault: 4 ft x 4 ft x 6 ft
    DEFAULT_VAULT_LENGTH_M: float = 1.22
    DEFAULT_VAULT_WIDTH_M: float = 1.22
    DEFAULT_VAULT_DEPTH_M: float = 1.83
    # Structure displacement as a share of excavation when the structure
    # envelope is not given
    VAULT_STRUCTURE_DISPLACEMENT_RATIO: float = 0.10


settings = Settings()
