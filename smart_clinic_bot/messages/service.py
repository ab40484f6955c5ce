"""
Message Service

Centralized message and keyboard management with per-locale JSON templates.

Template file layout (templates/<locale>/<category>.json):

    {
        "<key>": {"template": "<jinja2 text>", "variables": ["..."]},
        "keyboards": {
            "<keyboard_key>": {
                "type": "reply" | "inline" | "remove",
                "buttons": [[{"text": "...", "command": "navigation"}]]
            }
        }
    }

Reply buttons may carry a ``command`` (menu intent) or an ``action``
(skip / cancel); handlers resolve incoming text through this metadata
instead of comparing labels.
"""

import json
import logging
from pathlib import Path
from typing import Any, Dict, FrozenSet, List, Optional, Set, Union

from aiogram.types import (
    InlineKeyboardButton,
    InlineKeyboardMarkup,
    KeyboardButton,
    ReplyKeyboardMarkup,
    ReplyKeyboardRemove,
    WebAppInfo,
)
from jinja2 import Environment, TemplateError

from .commands import ButtonAction, MenuCommand
from .formatters import (
    MAX_MESSAGE_LENGTH,
    clean_telegram_text,
    escape_html,
    format_amount,
    format_date,
    format_datetime,
    months_label,
    progress_bar,
    truncate_message,
)

logger = logging.getLogger(__name__)

KeyboardMarkup = Union[ReplyKeyboardMarkup, InlineKeyboardMarkup, ReplyKeyboardRemove]

MAX_CALLBACK_DATA_BYTES = 64
DEFAULT_TEMPLATES_DIR = Path(__file__).parent / "templates"


class MessageService:
    """Централизованный сервис сообщений"""

    def __init__(self, templates_dir: Optional[Union[str, Path]] = None, locale: str = 'ru', debug_mode: bool = False):
        self.templates_dir = Path(templates_dir) if templates_dir else DEFAULT_TEMPLATES_DIR
        self.default_locale = locale
        self.debug_mode = debug_mode

        # Настройка Jinja2
        self.jinja_env = Environment(
            autoescape=False,  # Пользовательские значения экранируются фильтром |e
            trim_blocks=True,
            lstrip_blocks=True
        )
        self.jinja_env.filters.update({
            'e': escape_html,
            'date': format_date,
            'datetime': format_datetime,
            'money': format_amount,
            'months': months_label,
            'bar': progress_bar,
        })

        self._templates_cache: Dict[str, Dict[str, Dict[str, Any]]] = {}
        self._keyboards_cache: Dict[str, Dict[str, Dict[str, Any]]] = {}
        self._commands_index: Dict[str, Dict[str, MenuCommand]] = {}
        self._actions_index: Dict[str, Dict[str, Set[str]]] = {}

        self._load_all_templates()

        logger.info(f"MessageService initialized with templates from {self.templates_dir}")

    @property
    def locale(self) -> str:
        return self.default_locale

    def _load_all_templates(self):
        """Загрузка всех шаблонов из файлов"""
        if not self.templates_dir.exists():
            logger.warning(f"Templates directory not found: {self.templates_dir}")
            return

        for locale_dir in sorted(self.templates_dir.iterdir()):
            if locale_dir.is_dir():
                self._load_locale_templates(locale_dir.name)

    def _load_locale_templates(self, locale: str):
        """Загрузка шаблонов для конкретной локали"""
        locale_path = self.templates_dir / locale

        self._templates_cache[locale] = {}
        self._keyboards_cache[locale] = {}

        for json_file in sorted(locale_path.glob("*.json")):
            try:
                with json_file.open('r', encoding='utf-8') as f:
                    data = json.load(f)
            except (json.JSONDecodeError, IOError) as e:
                logger.error(f"Failed to load {json_file}: {e}")
                continue

            category = json_file.stem

            # Разделяем сообщения и клавиатуры
            if 'keyboards' in data:
                self._keyboards_cache[locale][category] = data.pop('keyboards')

            if data:
                self._templates_cache[locale][category] = data

            logger.debug(f"Loaded templates for {locale}/{category}")

        self._index_buttons(locale)

    def _index_buttons(self, locale: str):
        """Индекс label -> intent/action по метаданным кнопок"""
        commands: Dict[str, MenuCommand] = {}
        actions: Dict[str, Set[str]] = {}

        for category_keyboards in self._keyboards_cache[locale].values():
            for keyboard_data in category_keyboards.values():
                for row in keyboard_data.get('buttons', []):
                    for button in row:
                        text = button.get('text', '')
                        if '{' in text:
                            continue  # динамические надписи не индексируются

                        command = button.get('command')
                        if command:
                            try:
                                commands[text] = MenuCommand(command)
                            except ValueError:
                                logger.warning(f"Unknown menu command '{command}' for button '{text}'")

                        action = button.get('action')
                        if action:
                            actions.setdefault(action, set()).add(text)

        self._commands_index[locale] = commands
        self._actions_index[locale] = actions

    def get_message(self, key: str, category: str = 'general', locale: Optional[str] = None, **kwargs) -> str:
        """Получить сообщение с подстановкой переменных"""
        locale = locale or self.default_locale

        template_data = self._get_template_data(key, locale, category)
        if not template_data:
            logger.error(f"Message template not found: {locale}.{category}.{key}")
            return f"[MISSING: {locale}.{category}.{key}]"

        template_str = template_data.get('template', '')
        if not template_str:
            return f"[EMPTY_TEMPLATE: {locale}.{category}.{key}]"

        try:
            rendered = self.jinja_env.from_string(template_str).render(**kwargs)
        except TemplateError as e:
            logger.error(f"Error rendering template {locale}.{category}.{key}: {e}")
            return f"[TEMPLATE_ERROR: {locale}.{category}.{key}]"

        cleaned = clean_telegram_text(rendered)

        if self.debug_mode:
            debug_info = f"\n─────────────────────\n🔧 <b>DEBUG:</b> <code>{key}</code> | <i>{category}.json</i>"
            cleaned = truncate_message(cleaned, MAX_MESSAGE_LENGTH - len(debug_info)) + debug_info
        elif len(cleaned) > MAX_MESSAGE_LENGTH:
            cleaned = truncate_message(cleaned)
            logger.warning(f"Message truncated: {locale}.{category}.{key}")

        return cleaned

    def get_keyboard(self, keyboard_key: str, locale: Optional[str] = None, **kwargs) -> Optional[KeyboardMarkup]:
        """Получить готовую клавиатуру (reply, inline или удаление)"""
        locale = locale or self.default_locale

        keyboard_data = self._get_keyboard_data(keyboard_key, locale)
        if not keyboard_data:
            logger.warning(f"Keyboard not found: {locale}.{keyboard_key}")
            return None

        keyboard_type = keyboard_data.get('type', 'inline')
        if keyboard_type == 'remove':
            return ReplyKeyboardRemove()

        try:
            if keyboard_type == 'reply':
                return self._build_reply_keyboard(keyboard_data, kwargs)
            return self._build_inline_keyboard(keyboard_data, kwargs)
        except TemplateError as e:
            logger.error(f"Error building keyboard {locale}.{keyboard_key}: {e}")
            return None

    def resolve_command(self, text: Optional[str], locale: Optional[str] = None) -> Optional[MenuCommand]:
        """Интент меню по тексту кнопки"""
        if not text:
            return None
        return self._commands_index.get(locale or self.default_locale, {}).get(text.strip())

    def action_labels(self, action: Union[ButtonAction, str], locale: Optional[str] = None) -> FrozenSet[str]:
        action = ButtonAction(action).value
        return frozenset(self._actions_index.get(locale or self.default_locale, {}).get(action, ()))

    def is_action(self, text: Optional[str], action: Union[ButtonAction, str], locale: Optional[str] = None) -> bool:
        return bool(text) and text.strip() in self.action_labels(action, locale)

    def reload_templates(self):
        """Перезагрузка всех шаблонов"""
        self._templates_cache.clear()
        self._keyboards_cache.clear()
        self._commands_index.clear()
        self._actions_index.clear()
        self._load_all_templates()
        logger.info("Templates reloaded")

    def get_available_locales(self) -> List[str]:
        return list(self._templates_cache.keys())

    def get_available_categories(self, locale: Optional[str] = None) -> List[str]:
        return list(self._templates_cache.get(locale or self.default_locale, {}).keys())

    def _get_template_data(self, key: str, locale: str, category: str) -> Optional[Dict[str, Any]]:
        """Получить данные шаблона с fallback на ru"""
        template_data = self._templates_cache.get(locale, {}).get(category, {}).get(key)
        if template_data:
            return template_data

        if locale != 'ru':
            template_data = self._templates_cache.get('ru', {}).get(category, {}).get(key)
            if template_data:
                logger.debug(f"Using fallback ru for {locale}.{category}.{key}")
                return template_data

        return None

    def _get_keyboard_data(self, keyboard_key: str, locale: str) -> Optional[Dict[str, Any]]:
        """Получить данные клавиатуры с fallback на ru"""
        for category_keyboards in self._keyboards_cache.get(locale, {}).values():
            if keyboard_key in category_keyboards:
                return category_keyboards[keyboard_key]

        if locale != 'ru':
            for category_keyboards in self._keyboards_cache.get('ru', {}).values():
                if keyboard_key in category_keyboards:
                    return category_keyboards[keyboard_key]

        return None

    def _render(self, value: Optional[str], context: Dict[str, Any]) -> str:
        if not value:
            return ""
        if '{' not in value:
            return value
        return self.jinja_env.from_string(value).render(**context).strip()

    def _build_reply_keyboard(self, keyboard_data: Dict[str, Any], context: Dict[str, Any]) -> ReplyKeyboardMarkup:
        keyboard = []
        for row in keyboard_data.get('buttons', []):
            button_row = [
                KeyboardButton(text=text)
                for text in (self._render(button.get('text'), context) for button in row)
                if text
            ]
            if button_row:
                keyboard.append(button_row)

        return ReplyKeyboardMarkup(
            keyboard=keyboard,
            resize_keyboard=keyboard_data.get('resize', True),
            one_time_keyboard=keyboard_data.get('one_time', False)
        )

    def _build_inline_keyboard(self, keyboard_data: Dict[str, Any], context: Dict[str, Any]) -> InlineKeyboardMarkup:
        keyboard = []
        for row in keyboard_data.get('buttons', []):
            button_row = []
            for button_config in row:
                button = self._build_inline_button(button_config, context)
                if button:
                    button_row.append(button)

            if button_row:  # Добавляем ряд только если есть валидные кнопки
                keyboard.append(button_row)

        return InlineKeyboardMarkup(inline_keyboard=keyboard)

    def _build_inline_button(self, button_config: Dict[str, Any], context: Dict[str, Any]) -> Optional[InlineKeyboardButton]:
        text = self._render(button_config.get('text'), context)
        if not text:
            return None

        callback_data = self._render(button_config.get('callback_data'), context)
        if callback_data:
            if len(callback_data.encode('utf-8')) > MAX_CALLBACK_DATA_BYTES:
                logger.warning(f"callback_data too long, button skipped: {callback_data}")
                return None
            return InlineKeyboardButton(text=text, callback_data=callback_data)

        url = self._render(button_config.get('url'), context)
        if url:
            return InlineKeyboardButton(text=text, url=url)

        web_app = self._render(button_config.get('web_app'), context)
        if web_app:
            return InlineKeyboardButton(text=text, web_app=WebAppInfo(url=web_app))

        # Кнопка с пустой ссылкой (например, WEBAPP_URL не задан) не показывается
        logger.debug(f"Button without target skipped: {button_config.get('text')}")
        return None
