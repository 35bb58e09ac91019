"""Members page: team membership and per-area edit flags."""

import logging
from dataclasses import replace

import streamlit as st

from ...models import TeamMember
from ...services import AuthError, FetchError
from ..session import (
    current_members,
    current_permissions,
    current_team,
    init_session_state,
    is_backend,
    render_data_source,
    require,
)


logger = logging.getLogger(__name__)

FLAG_LABELS = {
    "can_edit_players": "Players",
    "can_edit_matches": "Matches",
    "can_edit_quarters": "Quarters",
}


def member_flags(member: TeamMember) -> str:
    """Comma separated areas a member may edit; coaches edit everything."""
    if member.is_coach:
        return "All"
    allowed = [label for flag, label in FLAG_LABELS.items() if getattr(member, flag)]
    return ", ".join(allowed) or "View only"


def save_member(member: TeamMember, **flags: bool) -> bool:
    """
    Store a member's edit flags.

    Coach rows cannot be changed. Returns False if an error was shown instead.
    """
    if member.is_coach:
        st.error("The coach's permissions cannot be changed.")
        return False

    updated = replace(member, **flags)
    if is_backend():
        try:
            st.session_state.client.update_member(updated)
        except (AuthError, FetchError) as e:
            logger.warning("Updating member %s failed: %s", member.id, e)
            st.error(f"Could not save member: {e}")
            return False

    st.session_state.members = [updated if m.id == member.id else m for m in current_members()]
    return True


def remove_member(member: TeamMember) -> bool:
    """Remove a member from the team; the coach cannot be removed."""
    if member.is_coach:
        st.error("The coach cannot be removed.")
        return False

    if is_backend():
        try:
            st.session_state.client.delete_member(member.id)
        except (AuthError, FetchError) as e:
            logger.warning("Removing member %s failed: %s", member.id, e)
            st.error(f"Could not remove member: {e}")
            return False

    st.session_state.members = [m for m in current_members() if m.id != member.id]
    return True


def _render_member_editor(member: TeamMember) -> None:
    with st.form(f"member_{member.id}"):
        st.markdown(f"**{member.user_id}** · {member.role.label}")
        cols = st.columns(len(FLAG_LABELS))
        flags = {}
        for col, (flag, label) in zip(cols, FLAG_LABELS.items()):
            with col:
                flags[flag] = st.checkbox(label, getattr(member, flag), key=f"{flag}_{member.id}")
        cols = st.columns(2)
        with cols[0]:
            saved = st.form_submit_button("Save")
        with cols[1]:
            removed = st.form_submit_button("Remove")

    if saved and require("members") and save_member(member, **flags):
        st.rerun()
    if removed and require("members") and remove_member(member):
        st.rerun()


def render() -> None:
    """Render the members page."""
    init_session_state()
    render_data_source()

    st.title(f"{current_team().name} members")
    members = current_members()
    if not members:
        st.info("The team has no members yet.")
        return

    st.dataframe(
        [
            {"User": m.user_id, "Role": m.role.label, "Can edit": member_flags(m)}
            for m in members
        ],
        hide_index=True,
        use_container_width=True,
    )

    if not current_permissions().can_manage_members:
        return

    st.subheader("Edit permissions")
    for member in members:
        if not member.is_coach:
            _render_member_editor(member)
