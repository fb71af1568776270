"""
Extraction orchestrator.
Runs the untracked message scan, the default message extraction and the
translation compatibility checks in order and collects what failed.
"""
import logging
from typing import List, Optional

import anyio

from ..errors import TaskListError, create_fail_error
from ..models.config import I18nConfig, IntegrationOptions, RunFlags
from ..models.messages import catalog_for_domain
from ..models.tasks import RunContext, Stage, SubTask
from .error_reporter import ErrorReporter
from .locale_integrator import LocaleIntegrator
from .message_extractor import MessageExtractor


class ExtractionOrchestrator:
    """Builds the stages of a check run and executes them."""

    def __init__(
        self,
        flags: RunFlags,
        config: I18nConfig,
        reporter: ErrorReporter,
        extractor: Optional[MessageExtractor] = None,
        integrator: Optional[LocaleIntegrator] = None,
    ):
        self.flags = flags
        self.config = config
        self.reporter = reporter
        self.extractor = extractor or MessageExtractor()
        self.integrator = integrator or LocaleIntegrator()

    def untracked_messages_tasks(self, context: RunContext) -> List[SubTask]:
        """One scan per source root, in configuration order."""
        def make_task(src_path: str) -> SubTask:
            async def run(ctx: RunContext):
                await self.extractor.extract_untracked_messages(src_path, self.config, ctx.reporter)
            return SubTask(title=f"Checking untracked messages in {src_path}", run=run)

        return [make_task(src_path) for src_path in self.config.scan_roots]

    def extract_default_messages_tasks(self, context: RunContext) -> List[SubTask]:
        return self.extractor.default_message_tasks(self.flags.path, self.config)

    def compatibility_checks_tasks(self, context: RunContext) -> List[SubTask]:
        """
        One check per translation file, against the messages of its domain.

        --fix tolerates every category and rewrites the file.
        """
        fix = self.flags.fix

        def make_task(translations_path: str) -> SubTask:
            options = IntegrationOptions(
                source_file=translations_path,
                target_file=translations_path if fix else None,
                dry_run=not fix,
                ignore_incompatible=self.flags.tolerate_incompatible,
                ignore_unused=self.flags.tolerate_unused,
                ignore_missing=self.flags.tolerate_missing,
                config=self.config,
            )
            domain = self.config.domain_for(translations_path)

            async def run(ctx: RunContext):
                await self.integrator.integrate_locale_file(catalog_for_domain(ctx.catalogs, domain), options)
            return SubTask(title=f"Compatibility check with {translations_path}", run=run)

        return [make_task(path) for path in self.config.translations]

    def build_stages(self) -> List[Stage]:
        return [
            Stage(
                title="Checking untracked messages",
                build=self.untracked_messages_tasks,
                enabled=not self.flags.ignore_untracked,
            ),
            Stage(
                title="Extracting Default Messages",
                build=self.extract_default_messages_tasks,
                exit_on_error=True,
            ),
            Stage(
                title="Compatibility Checks",
                build=self.compatibility_checks_tasks,
                concurrent=True,
            ),
        ]

    @staticmethod
    async def _run_task(task: SubTask, context: RunContext, errors: List[BaseException]) -> bool:
        try:
            await task.run(context)
        except Exception as e:
            logging.info("✖ %s", task.title)
            logging.debug("%s failed: %s", task.title, e)
            errors.append(e)
            return False
        logging.info("✔ %s", task.title)
        return True

    async def run_stage(self, stage: Stage, context: RunContext) -> List[BaseException]:
        """
        Run the sub-tasks of one stage.

        Returns:
            The errors raised by the failed sub-tasks, in completion order
        """
        errors: List[BaseException] = []
        try:
            tasks = stage.build(context)
        except Exception as e:
            errors.append(e)
            return errors

        logging.info("%s (%d task(s))", stage.title, len(tasks))
        if stage.concurrent:
            async with anyio.create_task_group() as task_group:
                for task in tasks:
                    task_group.start_soon(self._run_task, task, context, errors)
        else:
            for task in tasks:
                succeeded = await self._run_task(task, context, errors)
                if not succeeded and stage.exit_on_error:
                    break
        return errors

    async def run_async(self, context: Optional[RunContext] = None) -> RunContext:
        """
        Run every enabled stage in order.

        Raises:
            TaskListError: As soon as a stage finishes with failed sub-tasks
            FailError: If the run exceeds the configured timeout
        """
        context = context or RunContext(reporter=self.reporter)
        if not self.config.translations:
            logging.info("No translation files configured, nothing to check")
            return context
        try:
            with anyio.fail_after(self.flags.timeout):
                for stage in self.build_stages():
                    if not stage.enabled:
                        logging.info("%s [skipped]", stage.title)
                        continue
                    errors = await self.run_stage(stage, context)
                    if errors:
                        raise TaskListError(errors)
        except TimeoutError as e:
            raise create_fail_error(f"i18n check did not finish within {self.flags.timeout} seconds") from e
        return context

    def run(self) -> RunContext:
        return anyio.run(self.run_async)
