"""Dependency container wiring for the application."""

from collections.abc import Awaitable, Callable
from dataclasses import dataclass

from student_records.adapters.console_prompter import ConsolePrompter
from student_records.adapters.image_compressor import PillowImageCompressor
from student_records.adapters.student_api_client import (
    HttpxStudentApiClient,
    StudentApiClient,
)
from student_records.app_logging import configure_logging
from student_records.config import Settings, parse_page_size_options
from student_records.services.auth import AuthService, Session
from student_records.services.cache import InMemoryCache
from student_records.services.interaction import (
    ListRenderer,
    LoggingNotifier,
    Notifier,
    Prompter,
)
from student_records.services.listing import ListController
from student_records.services.lookup import LookupResolver, StateDirectory
from student_records.services.records import RecordFormController
from student_records.services.uploads import UploadPipeline


@dataclass
class AppContainer:
    """Holds application-wide dependencies."""

    settings: Settings
    session: Session
    api_client: StudentApiClient
    auth_service: AuthService
    state_directory: StateDirectory
    lookup_resolver: LookupResolver
    upload_pipeline: UploadPipeline
    list_controller: ListController
    record_form: RecordFormController
    close_resources: Callable[[], Awaitable[None]]


def build_container(
    settings: Settings | None = None,
    notifier: Notifier | None = None,
    prompter: Prompter | None = None,
    renderer: ListRenderer | None = None,
) -> AppContainer:
    """Create the default dependency container."""
    configure_logging()
    resolved_settings = settings or Settings()
    resolved_notifier = notifier or LoggingNotifier()
    resolved_prompter = prompter or ConsolePrompter()

    session = Session()
    if resolved_settings.api_token:
        session.init(resolved_settings.api_token)
    api_client = HttpxStudentApiClient.create(
        base_url=resolved_settings.api_base_url,
        session=session,
        timeout=resolved_settings.request_timeout_seconds,
    )
    state_directory = StateDirectory(
        client=api_client,
        cache=InMemoryCache(),
        ttl_seconds=resolved_settings.states_cache_ttl_seconds,
    )
    lookup_resolver = LookupResolver(state_directory)
    upload_pipeline = UploadPipeline(
        client=api_client,
        compressor=PillowImageCompressor(
            max_size_bytes=int(resolved_settings.photo_max_size_kb * 1024),
            max_edge_px=resolved_settings.photo_max_edge_px,
        ),
    )
    page_size_options = parse_page_size_options(resolved_settings.page_size_options)
    default_page_size = resolved_settings.default_page_size
    if default_page_size not in page_size_options:
        default_page_size = page_size_options[0]
    list_controller = ListController(
        client=api_client,
        notifier=resolved_notifier,
        prompter=resolved_prompter,
        renderer=renderer,
        page_size_options=page_size_options,
        page_size=default_page_size,
    )
    record_form = RecordFormController(
        client=api_client,
        resolver=lookup_resolver,
        uploads=upload_pipeline,
        notifier=resolved_notifier,
        prompter=resolved_prompter,
        update_password=resolved_settings.update_password,
    )
    auth_service = AuthService(
        client=api_client, session=session, notifier=resolved_notifier
    )

    async def close_resources() -> None:
        await api_client.close()

    return AppContainer(
        settings=resolved_settings,
        session=session,
        api_client=api_client,
        auth_service=auth_service,
        state_directory=state_directory,
        lookup_resolver=lookup_resolver,
        upload_pipeline=upload_pipeline,
        list_controller=list_controller,
        record_form=record_form,
        close_resources=close_resources,
    )
