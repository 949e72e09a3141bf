from nicegui import app, ui
from flashdeck.core.locale_manager import T, SUPPORTED_LOCALES, LOCALE_STORAGE_KEY, FALLBACK_LOCALE

def setup_page():
    ui.dark_mode() # Enable dark mode globally. For now, we keep it here.
    ui.add_head_html("<style>html, #c3 { padding: 0 !important;}</style>") # Remove default padding from html and #c3

def create_navbar():
    with ui.header().classes('w-full bg-black text-white justify-between items-center px-6 py-2 shadow-md'):
        with ui.column().classes('gap-0'):
            ui.label(T("app_title")).classes('text-xl font-bold tracking-tight')
            ui.label(T("shortcuts_hint")).classes('text-xs text-gray-400')

        def change_language(e):
            app.storage.user[LOCALE_STORAGE_KEY] = e.value
            ui.navigate.reload()

        ui.select(
            options=SUPPORTED_LOCALES,
            value=app.storage.user.get(LOCALE_STORAGE_KEY, FALLBACK_LOCALE),
            label=T("language"),
            on_change=change_language,
        ).props('dense dark outlined').classes('w-28')
