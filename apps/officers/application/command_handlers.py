"""
Officer Registration Command Handlers

Commands:
- RequestRegistrationCommand: Officer asks to handle a project
- ApproveRegistrationCommand: Project manager approves, one slot is taken
- RejectRegistrationCommand: Project manager rejects
"""

from dataclasses import dataclass
from typing import Callable
import logging

from apps.officers.domain.entities import Officer

logger = logging.getLogger(__name__)


# ===== Commands =====

@dataclass
class RequestRegistrationCommand:
    officer_nric: str
    project_name: str


@dataclass
class ApproveRegistrationCommand:
    """Command to approve the officer's pending registration"""
    manager_nric: str
    officer_nric: str


@dataclass
class RejectRegistrationCommand:
    """Command to reject the officer's pending registration"""
    manager_nric: str
    officer_nric: str


# ===== Command Handlers =====

def _live_projects(uow, officer: Officer):
    return [uow.projects.get(r.project_name) for r in officer.live_registrations]


class RequestRegistrationHandler:
    """
    Handler for RequestRegistration command

    The officer's live registrations are resolved to projects so the
    aggregate can compare application periods.
    """

    def __init__(self, uow_factory: Callable):
        self.uow_factory = uow_factory

    def handle(self, command: RequestRegistrationCommand) -> Officer:
        logger.info(f"Officer {command.officer_nric} requesting to handle '{command.project_name}'")

        with self.uow_factory() as uow:
            officer = uow.officers.get(command.officer_nric, lock=True)
            project = uow.projects.get(command.project_name)

            officer.request_registration(project, _live_projects(uow, officer))

            uow.officers.save(officer)
            uow.collect_events(officer)

        logger.info(f"Officer {officer.nric} registration for '{project.name}' is pending")
        return officer


class ApproveRegistrationHandler:
    """
    Handler for ApproveRegistration command

    Locks officer, then project: the project's officer slot counter is
    decremented in the same unit of work as the registration changes.
    """

    def __init__(self, uow_factory: Callable):
        self.uow_factory = uow_factory

    def handle(self, command: ApproveRegistrationCommand) -> Officer:
        logger.info(f"Manager {command.manager_nric} approving registration of officer {command.officer_nric}")

        with self.uow_factory() as uow:
            officer = uow.officers.get(command.officer_nric, lock=True)
            registration = officer.require_pending('approve registration of')
            project = uow.projects.get(registration.project_name, lock=True)

            officer.approve_registration(command.manager_nric, project)

            uow.projects.save(project)
            uow.officers.save(officer)
            uow.collect_events(project)
            uow.collect_events(officer)

        logger.info(
            f"Officer {officer.nric} approved for '{project.name}', "
            f"{project.officer_slots} officer slots left"
        )
        return officer


class RejectRegistrationHandler:
    """Handler for RejectRegistration command"""

    def __init__(self, uow_factory: Callable):
        self.uow_factory = uow_factory

    def handle(self, command: RejectRegistrationCommand) -> Officer:
        logger.info(f"Manager {command.manager_nric} rejecting registration of officer {command.officer_nric}")

        with self.uow_factory() as uow:
            officer = uow.officers.get(command.officer_nric, lock=True)
            registration = officer.require_pending('reject registration of')
            project = uow.projects.get(registration.project_name)

            officer.reject_registration(command.manager_nric, project)

            uow.officers.save(officer)
            uow.collect_events(officer)

        return officer
