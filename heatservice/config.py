from pydantic_settings import BaseSettings

from heatengine.advisor.scheduler import SearchOptions
from heatengine.advisor.surface_optimizer import SurfaceSearchConfig


class Settings(BaseSettings):
    model_config = {"env_prefix": "", "case_sensitive": False}

    # App
    environment: str = "development"
    debug: bool = True
    app_name: str = "HeatAdvisor"

    # Redis
    redis_url: str = "redis://localhost:6379/0"

    # Logging
    log_level: str = "INFO"
    log_json: bool = False

    # Sizing search
    use_surface_optimization: bool = True
    max_workers: int = 1
    storage_volume_max: float = 3.0
    exhaustive_max_cells: int = 55

    # Surface search tuning
    surface_target_segments: int = 3
    surface_target_step: int = 100
    surface_gradient_factor_large: float = 0.12
    surface_gradient_factor_small: float = 0.38
    surface_small_grid_cells: int = 200


settings = Settings()


def search_options(config: Settings = settings) -> SearchOptions:
    """Engine search options from service settings."""
    return SearchOptions(
        use_surface_optimization=config.use_surface_optimization,
        exhaustive_max_cells=config.exhaustive_max_cells,
        max_workers=config.max_workers,
        surface=SurfaceSearchConfig(
            target_segments=config.surface_target_segments,
            target_step=config.surface_target_step,
            gradient_factor_large=config.surface_gradient_factor_large,
            gradient_factor_small=config.surface_gradient_factor_small,
            small_grid_cells=config.surface_small_grid_cells,
        ),
    )
