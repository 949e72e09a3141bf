from datetime import datetime
from typing import Dict
from nicegui import ui, app, events

from flashdeck.config import STORAGE_BACKEND
from flashdeck.database import engine
from flashdeck.pages.common import setup_page, create_navbar
from flashdeck.core.locale_manager import T
from flashdeck.core.log_manager import logger
from flashdeck.models import FilterMode, SortMode
from flashdeck.services import session_service
from flashdeck.services.form_service import LENGTH_LIMITS, validate_card_codes
from flashdeck.services.keyboard_service import Command, TEXT_ENTRY_TAGS, RELEASE_BUTTON_FOCUS_JS, command_for_key
from flashdeck.services.persistence_service import DeckGateway, MappingBlobStore, SqlBlobStore

def build_controller() -> session_service.StudyController:
    """One controller per page client, backed by the configured blob store."""
    if STORAGE_BACKEND == 'user':
        store = MappingBlobStore(app.storage.user)
    else:
        store = SqlBlobStore(engine)
    controller = session_service.StudyController(DeckGateway(store))
    controller.start()
    return controller

def format_created(created_at: int) -> str:
    if not created_at:
        return "-"
    return datetime.fromtimestamp(created_at / 1000).strftime("%Y-%m-%d %H:%M")

@ui.page('/')
def deck_page():
    setup_page()
    create_navbar()
    ui.add_css('assets/global.css')

    # --- STATE & INITIALIZATION ---
    controller = build_controller()
    form: Dict[str, object] = {"front": "", "back": "", "known": False, "errors": {}}
    save_warning = {"shown": False}

    # --- LOGIC CONTROLLERS ---

    def refresh():
        if not controller.last_save_ok and not save_warning["shown"]:
            save_warning["shown"] = True
            ui.notify(T("save_failed"), type='warning')
        stats_panel.refresh()
        study_panel.refresh()
        card_list.refresh()

    def run(reducer, *args):
        controller.apply(reducer, *args)
        refresh()

    def reset_form():
        form.update({"front": "", "back": "", "known": False, "errors": {}})
        controller.apply(session_service.cancel_edit)
        form_panel.refresh()

    def start_edit(card_id: str):
        controller.apply(session_service.start_edit, card_id)
        card = session_service.editing_card(controller.state)
        if card:
            form.update({"front": card.front, "back": card.back, "known": card.known, "errors": {}})
        form_panel.refresh()

    def submit():
        was_editing = controller.state.editing_id is not None
        errors = controller.submit(form["front"], form["back"], bool(form["known"]))
        if errors:
            form["errors"] = validate_card_codes(form["front"], form["back"])
            form_panel.refresh()
            return
        ui.notify(T("card_updated") if was_editing else T("card_added"), type='positive')
        form.update({"front": "", "back": "", "known": False, "errors": {}})
        form_panel.refresh()
        refresh()

    def delete(card_id: str):
        was_editing = controller.state.editing_id == card_id
        run(session_service.delete_card, card_id)
        if was_editing:
            reset_form()

    def clear_all():
        clear_dialog.close()
        run(session_service.clear_deck)
        reset_form()
        logger.info("Deck cleared by user.")

    # --- KEYBOARD ---
    def handle_key(e: events.KeyEventArguments):
        if not e.action.keydown:
            return
        command = command_for_key(str(e.key.name))
        if command == Command.FLIP:
            run(session_service.flip_card)
        elif command == Command.NEXT:
            run(session_service.next_card)
        elif command == Command.PREV:
            run(session_service.prev_card)
        elif command == Command.TOGGLE_KNOWN:
            run(session_service.toggle_known_current)

    # ignore= keeps shortcuts silent while typing in the form
    ui.keyboard(on_key=handle_key, ignore=TEXT_ENTRY_TAGS)
    ui.add_head_html(f"<script>{RELEASE_BUTTON_FOCUS_JS}</script>")

    # --- REFRESHABLE SECTIONS ---

    @ui.refreshable
    def stats_panel():
        stats = session_service.stats(controller.state)
        with ui.row().classes('gap-2 items-center'):
            ui.label(T("stats_total", count=stats["total"])).classes('pill')
            ui.label(T("stats_known", count=stats["known"])).classes('pill')
            ui.label(T("stats_unknown", count=stats["unknown"])).classes('pill')
            ui.label(T("saved_automatically")).classes('pill text-xs text-gray-400')

    @ui.refreshable
    def study_panel():
        view = session_service.study_view(controller.state)
        visible_count = view["total"]

        with ui.card().classes('w-full min-h-[220px] bg-gray-900 border border-white/20 cursor-pointer study-card') \
                .on('click', lambda: run(session_service.flip_card)):
            if view["position"]:
                side = T("side_back") if view["side"] == "Back" else T("side_front")
                status = T("status_known") if view["known"] else T("status_unknown")
                ui.label(f"{side} • {view['position']} / {view['total']} • {status}") \
                    .classes('text-xs text-gray-400 uppercase tracking-widest')
                ui.label(view["text"]).classes('text-xl text-white whitespace-pre-wrap mt-4')
                ui.label(T("click_to_flip")).classes('text-xs text-gray-500 mt-auto')
            else:
                ui.label(T("no_cards_match")).classes('text-xs text-gray-400 uppercase tracking-widest')
                ui.label(T("no_cards_match_hint")).classes('text-lg text-gray-300 mt-4')

        with ui.row().classes('gap-2 mt-3'):
            ui.button(T("prev"), on_click=lambda: run(session_service.prev_card)).set_enabled(visible_count > 0)
            ui.button(T("next"), on_click=lambda: run(session_service.next_card)).set_enabled(visible_count > 0)
            ui.button(T("flip"), on_click=lambda: run(session_service.flip_card)).set_enabled(visible_count > 0)
            ui.button(T("toggle_known"), on_click=lambda: run(session_service.toggle_known_current)) \
                .set_enabled(visible_count > 0)
            ui.button(T("shuffle"), icon='shuffle', on_click=lambda: run(session_service.shuffle_visible)) \
                .set_enabled(visible_count > 1)

    @ui.refreshable
    def form_panel():
        editing = controller.state.editing_id is not None
        errors = form["errors"]

        ui.label(T("edit_card") if editing else T("add_card")).classes('font-bold text-gray-300 text-lg')

        front_input = ui.input(T("front"), value=form["front"]).classes('w-full')
        front_input.on_value_change(lambda e: form.update(front=e.value))
        if errors.get("front"):
            ui.label(T(errors["front"], **LENGTH_LIMITS["front"])).classes('text-sm text-red-400')

        back_input = ui.textarea(T("back"), value=form["back"]).classes('w-full')
        back_input.on_value_change(lambda e: form.update(back=e.value))
        if errors.get("back"):
            ui.label(T(errors["back"], **LENGTH_LIMITS["back"])).classes('text-sm text-red-400')

        ui.checkbox(T("mark_as_known"), value=bool(form["known"]),
                    on_change=lambda e: form.update(known=e.value))

        with ui.row().classes('gap-2 mt-2'):
            ui.button(T("save_changes") if editing else T("add_card"), on_click=submit) \
                .props('color=indigo-600')
            ui.button(T("reset"), on_click=reset_form).props('flat')
            ui.button(T("clear_deck"), on_click=clear_dialog.open).props('color=red-900') \
                .set_enabled(bool(controller.state.deck.cards))

    @ui.refreshable
    def card_list():
        visible = session_service.visible_cards(controller.state)
        ui.label(T("cards_shown", count=len(visible))).classes('font-bold text-gray-300')
        if not visible:
            ui.label(T("no_cards_to_show")).classes('text-gray-500 italic')
            return

        with ui.scroll_area().classes('h-96 w-full'):
            for card in visible:
                with ui.row().classes('w-full justify-between items-start p-2 bg-black/30 rounded border border-white/5'):
                    with ui.column().classes('gap-0'):
                        ui.label(card.front).classes('text-sm text-gray-200')
                        status = T("status_known") if card.known else T("status_unknown")
                        ui.label(f"{status} • {format_created(card.created_at)}").classes('text-xs text-gray-500')
                    with ui.row().classes('gap-1'):
                        ui.button(T("mark_unknown") if card.known else T("mark_known"),
                                  on_click=lambda cid=card.id: run(session_service.toggle_known, cid)).props('flat dense')
                        ui.button(T("edit"), on_click=lambda cid=card.id: start_edit(cid)).props('flat dense')
                        ui.button(T("delete"), on_click=lambda cid=card.id: delete(cid)).props('flat dense color=red')

    # --- CLEAR CONFIRMATION ---
    with ui.dialog() as clear_dialog, ui.card().classes('bg-gray-900 border border-white/10'):
        ui.label(T("clear_deck_confirm")).classes('text-xl font-bold text-white')
        with ui.row().classes('w-full justify-end gap-4 mt-6'):
            ui.button(T("cancel"), on_click=clear_dialog.close).props('flat color=white')
            ui.button(T("confirm_delete"), color='red', on_click=clear_all)

    # --- LAYOUT ---
    with ui.column().classes('w-screen min-h-screen gradient-bg text-white p-6'):
        with ui.row().classes('w-full max-w-6xl mx-auto justify-end'):
            ui.input(T("deck_name"), value=controller.state.deck.name, placeholder="My Deck",
                     on_change=lambda e: run(session_service.set_deck_name, e.value or "")).classes('w-64')

        with ui.grid(columns=1).classes('w-full max-w-6xl mx-auto md:grid-cols-2 gap-6'):
            with ui.card().classes('bg-black/30 p-4 border border-indigo-600/50'):
                with ui.row().classes('w-full gap-4'):
                    ui.input(T("search"), placeholder=T("search_placeholder"), value=controller.state.config.query,
                             on_change=lambda e: run(session_service.set_query, e.value or "")).classes('grow')
                    ui.select(
                        {FilterMode.ALL.value: T("filter_all"),
                         FilterMode.UNKNOWN.value: T("filter_unknown"),
                         FilterMode.KNOWN.value: T("filter_known")},
                        value=controller.state.config.filter.value, label=T("filter"),
                        on_change=lambda e: run(session_service.set_filter, e.value),
                    ).classes('w-32')
                    ui.select(
                        {SortMode.NEWEST.value: T("sort_newest"),
                         SortMode.OLDEST.value: T("sort_oldest"),
                         SortMode.ALPHA.value: T("sort_alpha")},
                        value=controller.state.config.sort.value, label=T("sort"),
                        on_change=lambda e: run(session_service.set_sort, e.value),
                    ).classes('w-40')

                stats_panel()
                ui.separator().classes('my-4 opacity-30')
                ui.label(T("study")).classes('font-bold text-gray-300')
                study_panel()

            with ui.card().classes('bg-black/30 p-4 border border-green-600/50'):
                form_panel()
                ui.separator().classes('my-4 opacity-30')
                card_list()
                ui.label(T("study_uses_view")).classes('text-xs text-gray-500 mt-2')
