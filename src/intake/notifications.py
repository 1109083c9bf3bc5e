"""Email notifications for step completion, project completion and reminders.

Messages are rendered from Jinja2 templates in ``templates/`` and handed to a
:class:`~core.transports.base.MailTransport`.  Every recipient is a separate
attempt: a failure is logged and recorded in the returned
:class:`DeliveryReport`, never raised, so a broken mail server cannot undo or
block the state change that triggered the notification.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone
from pathlib import Path
from typing import Callable, List, Optional

from jinja2 import Environment, FileSystemLoader, select_autoescape

from core.transports.base import MailMessage, MailTransport
from shared.schemas.projects import Project

from . import progress
from .steps import STEPS, step_title

logger = logging.getLogger(__name__)

TEMPLATE_DIR = Path(__file__).parent / "templates"


@dataclass
class Delivery:
    recipient: str
    subject: str
    ok: bool
    error: Optional[str] = None


@dataclass
class DeliveryReport:
    kind: str
    project_id: str
    deliveries: List[Delivery] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return bool(self.deliveries) and all(d.ok for d in self.deliveries)

    @property
    def failures(self) -> List[Delivery]:
        return [d for d in self.deliveries if not d.ok]


class NotificationDispatcher:
    def __init__(
        self,
        transport: MailTransport,
        *,
        operator_email: str = "",
        base_url: str = "http://localhost:8000",
        brand: str = "Intake Portal",
        clock: Optional[Callable[[], datetime]] = None,
    ):
        self.transport = transport
        self.operator_email = operator_email
        self.base_url = base_url.rstrip("/")
        self.brand = brand
        self._clock = clock or (lambda: datetime.now(timezone.utc))
        self._jinja = Environment(
            loader=FileSystemLoader(str(TEMPLATE_DIR)),
            autoescape=select_autoescape(["html"]),
        )

    # ------------------------------------------------------------------
    # Rendering
    # ------------------------------------------------------------------

    def _context(self, project: Project, **extra) -> dict:
        ctx = {
            "brand": self.brand,
            "project": project,
            "rate": project.completion_rate,
            "done": project.completed_step_count,
            "total": progress.TOTAL_STEPS,
            "steps": STEPS,
            "project_url": f"{self.base_url}/project/{project.id}",
            "admin_url": f"{self.base_url}/admin",
            "today": self._clock().date().isoformat(),
        }
        ctx.update(extra)
        return ctx

    def _render(self, template: str, ctx: dict) -> str:
        return self._jinja.get_template(template).render(**ctx)

    def _message(self, to: str, subject: str, template: str, ctx: dict, text: str) -> MailMessage:
        return MailMessage(to=to, subject=subject, html=self._render(template, ctx), text=text)

    # ------------------------------------------------------------------
    # Delivery
    # ------------------------------------------------------------------

    def _deliver(self, kind: str, project: Project, messages: List[MailMessage]) -> DeliveryReport:
        report = DeliveryReport(kind=kind, project_id=project.id)
        for message in messages:
            try:
                self.transport.send(message)
            except Exception as e:
                logger.error(
                    "Failed to send %s notification for project %s to %s: %s",
                    kind, project.id, message.to, e,
                )
                report.deliveries.append(Delivery(message.to, message.subject, False, str(e)))
                continue
            report.deliveries.append(Delivery(message.to, message.subject, True))

        if report.ok:
            logger.info("%s notification sent for project %s", kind, project.id)
        return report

    def _with_operator(self, client: MailMessage, build_operator: Callable[[str], MailMessage]) -> List[MailMessage]:
        messages = [client]
        if self.operator_email:
            messages.append(build_operator(self.operator_email))
        else:
            logger.info("ADMIN_EMAIL not set, skipping operator notification")
        return messages

    # ------------------------------------------------------------------
    # Events
    # ------------------------------------------------------------------

    def notify_step_completed(self, project: Project, step: int) -> DeliveryReport:
        title = step_title(step)
        ctx = self._context(project, step=step, step_title=title)
        client = self._message(
            project.email,
            f"[{self.brand}] Step {step} ({title}) completed",
            "step_completed_client.html",
            ctx,
            f"Hello {project.manager_name},\n\n"
            f"step {step} ({title}) of the {project.company_name} web-site project is complete.\n"
            f"Progress: {project.completion_rate}% ({ctx['done']} of {ctx['total']} steps).\n\n"
            f"Continue: {ctx['project_url']}\n",
        )
        messages = self._with_operator(
            client,
            lambda to: self._message(
                to,
                f"[Intake] {project.company_name} - step {step} ({title}) completed",
                "step_completed_operator.html",
                ctx,
                f"{project.company_name} completed step {step} ({title}); "
                f"progress {project.completion_rate}%. Project {project.id}.\n",
            ),
        )
        return self._deliver("step_completed", project, messages)

    def notify_project_completed(self, project: Project) -> DeliveryReport:
        ctx = self._context(project)
        client = self._message(
            project.email,
            f"[{self.brand}] All materials for {project.company_name} received",
            "project_completed_client.html",
            ctx,
            f"Hello {project.manager_name},\n\n"
            f"all materials for the {project.company_name} web-site project have been received. "
            f"Our design team will start working on the site.\n",
        )
        messages = self._with_operator(
            client,
            lambda to: self._message(
                to,
                f"[Intake complete] {project.company_name} - all {progress.TOTAL_STEPS} steps submitted",
                "project_completed_operator.html",
                ctx,
                f"{project.company_name} ({project.manager_name}, {project.email}, {project.phone}) "
                f"submitted all steps. Project {project.id}.\n",
            ),
        )
        return self._deliver("project_completed", project, messages)

    def notify_reminder(self, project: Project) -> DeliveryReport:
        pending = [step_title(n) for n in progress.incomplete_steps(project.progress)]
        ctx = self._context(project, pending=pending)
        message = self._message(
            project.email,
            f"[Reminder] {project.company_name}: we are still waiting for your materials",
            "reminder.html",
            ctx,
            f"Hello {project.manager_name},\n\n"
            f"the {project.company_name} project is {project.completion_rate}% complete. Still open:\n"
            + "".join(f"- {title}\n" for title in pending)
            + f"\nContinue: {ctx['project_url']}\n",
        )
        return self._deliver("reminder", project, [message])
