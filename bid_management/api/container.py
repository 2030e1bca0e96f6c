"""Wires the store, config and services used by the HTTP layer."""

from dataclasses import dataclass

from ..ai import AIClient
from ..config import Config
from ..database.base import Store
from ..importer import ExcelImporter
from ..scorer import load_weights
from ..services import (
    ActivityLogger,
    CompanyService,
    DocumentService,
    FinanceService,
    MeetingService,
    NotRelevantService,
    ScoringService,
    TenderService,
    UserService,
)


@dataclass
class Services:
    config: Config
    store: Store
    activity: ActivityLogger
    users: UserService
    tenders: TenderService
    not_relevant: NotRelevantService
    finance: FinanceService
    meetings: MeetingService
    documents: DocumentService
    company: CompanyService
    scoring: ScoringService
    importer: ExcelImporter
    ai: AIClient

    @classmethod
    def build(cls, config: Config, store: Store, ai: AIClient = None) -> "Services":
        activity = ActivityLogger(store)
        company = CompanyService(store)
        scoring = ScoringService(store, company, load_weights(config.scoring_weights_path))
        return cls(
            config=config,
            store=store,
            activity=activity,
            users=UserService(store, config.jwt_secret, config.jwt_expires_days),
            tenders=TenderService(store, activity),
            not_relevant=NotRelevantService(store, activity),
            finance=FinanceService(store),
            meetings=MeetingService(store),
            documents=DocumentService(store, activity, config.upload_dir, config.max_upload_bytes),
            company=company,
            scoring=scoring,
            importer=ExcelImporter(store, activity, scoring),
            ai=ai or AIClient.from_config(config),
        )
