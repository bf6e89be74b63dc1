import streamlit as st

from visitor_console.api_client import api_client
from visitor_console.permissions import get_accessible_pages, get_role_display_name
from visitor_console.session import init_page

# Page configuration - must be first Streamlit command
st.set_page_config(
    page_title="Visitor Management Console",
    page_icon="🛂",
    layout="wide",
    initial_sidebar_state="expanded"
)


def main():
    """Main application entry point"""

    with st.sidebar:
        st.title("Visitor Management")
        st.caption(f"Backend: {api_client.base_url}")
        st.markdown("---")

        token = st.text_input(
            "API token",
            value=st.session_state.get("api_token", api_client.get_token() or ""),
            type="password",
            help="Bearer token sent with every request"
        )
        if token != st.session_state.get("api_token"):
            st.session_state.api_token = token or None
            st.session_state.current_user = None

    user = init_page()

    st.title("🛂 Visitor Management Console")

    if user is None:
        if st.session_state.get("profile_error"):
            st.error(st.session_state.profile_error)
        st.warning("⚠️ Enter an API token in the sidebar to load your profile")
        return

    with st.sidebar:
        st.subheader("👤 Current User")
        st.markdown(f"**{user.full_name or user.email}**")
        st.markdown(get_role_display_name(user.role))
        st.caption(user.email or "")

    st.markdown(f"Welcome back, **{user.full_name or user.email}**!")
    st.markdown("---")

    st.markdown("### 🚀 Quick Navigation")
    pages = get_accessible_pages(user)
    cols = st.columns(len(pages))
    for col, page in zip(cols, pages):
        with col:
            st.page_link(page["file"], label=page["name"], icon=page["icon"])


if __name__ == "__main__":
    main()
