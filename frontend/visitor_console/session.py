"""
Streamlit session helpers shared by the pages.
"""

import logging
from typing import Callable, Optional, TypeVar

import streamlit as st

from .api_client import api_client
from .config import settings
from .exceptions import ConsoleError
from .logging_config import setup_logging
from .schemas import User
from .services import profile_service
from .stores import Store

logger = logging.getLogger(__name__)

StoreT = TypeVar("StoreT", bound=Store)


def init_page() -> Optional[User]:
    """Common page setup: logging, token and the acting user"""
    setup_logging(settings.DEBUG)

    if "api_token" in st.session_state:
        api_client.set_token(st.session_state.api_token)

    if st.session_state.get("current_user") is None and api_client.get_token():
        try:
            st.session_state.current_user = profile_service.get_profile()
        except ConsoleError as e:
            logger.warning(f"Could not load profile: {e}")
            st.session_state.current_user = None
            st.session_state.profile_error = str(e)

    return st.session_state.get("current_user")


def get_store(key: str, factory: Callable[[], StoreT]) -> StoreT:
    """One store instance per session, created on first use"""
    if key not in st.session_state:
        st.session_state[key] = factory()
    return st.session_state[key]


def show_messages(store: Store, key: str) -> None:
    """Render (and expire) a store's error/success banners"""
    store.expire_messages()

    if store.error:
        col1, col2 = st.columns([10, 1])
        with col1:
            st.error(store.error)
        with col2:
            if st.button("✖", key=f"{key}_dismiss_error"):
                store.clear_error()
                st.rerun()

    if store.success:
        st.success(store.success)


def run_action(fn: Callable, *args, **kwargs):
    """Run a store action from a widget callback; the store already holds the error"""
    try:
        return fn(*args, **kwargs)
    except ConsoleError:
        return None
