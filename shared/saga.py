import structlog

from shared.observability import doodle_saga_compensation_total

logger = structlog.get_logger(__name__)

class SagaStep:
    def __init__(self, name, action, compensation=None):
        self.name = name
        self.action = action
        self.compensation = compensation

class SagaOrchestrator:
    def __init__(self, name: str):
        self.name = name
        self.steps = []

    def add_step(self, name: str, action, compensation=None):
        """Builder pattern to add a step and its rollback compensation.

        A compensation that returns ``False`` declined to undo its step; it is
        logged as skipped and not counted as a rollback.
        """
        self.steps.append(SagaStep(name, action, compensation))
        return self

    async def execute(self, ctx: dict):
        """Executes steps sequentially. Triggers rollback on any exception."""
        executed_steps = []
        step = None
        try:
            for step in self.steps:
                await step.action(ctx)
                executed_steps.append(step)
            return ctx
        except Exception as e:
            logger.error("saga_step_failed", saga=self.name, step=step.name, error=str(e))
            ctx["failed_step"] = step.name
            await self._rollback(executed_steps, ctx)
            raise

    async def _rollback(self, executed_steps: list, ctx: dict):
        """Executes compensations in reverse order. Wraps each in a try/except."""
        logger.info("saga_rollback_started", saga=self.name)
        for step in reversed(executed_steps):
            if step.compensation:
                try:
                    if await step.compensation(ctx) is False:
                        logger.warning("saga_compensation_skipped", saga=self.name, step=step.name)
                        continue
                    logger.info("saga_compensation_done", saga=self.name, step=step.name)
                    doodle_saga_compensation_total.labels(step_name=step.name).inc()
                except Exception as ce:
                    # A failing compensation must not block the others
                    logger.critical(
                        "saga_compensation_failed",
                        saga=self.name,
                        step=step.name,
                        error=str(ce),
                    )
