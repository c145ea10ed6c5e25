import logging

from heatengine.simulation.runner import run_simulation
from heatservice.config import search_options, settings
from heatservice.core.logging import new_run_id, run_id_var
from heatservice.schemas.simulation import SimulationRequest, SimulationResponse
from heatservice.worker import celery_app

logger = logging.getLogger(__name__)


@celery_app.task(bind=True, name="run_heating_optimization")
def run_heating_optimization(self, payload: dict) -> dict:
    """Assess every heating option for one household and return the response dict."""
    token = run_id_var.set(self.request.id or new_run_id())
    try:
        request = SimulationRequest.model_validate(payload)

        def _progress(step: str, fraction: float) -> None:
            if not self.request.is_eager:
                self.update_state(
                    state="PROGRESS",
                    meta={"step": step, "progress": round(fraction * 100.0, 1)},
                )

        storage_volume_max = request.storage_volume_max or settings.storage_volume_max
        logger.info(
            "Heating optimisation started: %.0f m2, %d occupants, store up to %.1f m3",
            request.house_size,
            request.num_occupants,
            storage_volume_max,
            extra={"task_id": self.request.id},
        )
        results = run_simulation(
            request.to_household(),
            request.to_annual(),
            storage_volume_max=storage_volume_max,
            options=search_options(settings),
            progress_callback=_progress,
        )
        return SimulationResponse.from_results(results).model_dump()
    except Exception:
        logger.exception("Heating optimisation failed")
        raise
    finally:
        run_id_var.reset(token)
