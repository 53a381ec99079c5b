import logging
from datetime import datetime, timezone

import altair as alt
import pandas as pd
import streamlit as st

from bidboard import config
from bidboard.analysis.fit import RECOMMENDATIONS
from bidboard.board import BidBoard, SORT_KEYS
from bidboard.utils.cleaning import format_amount
from bidboard.utils.persistence import JsonStore

logging.basicConfig(level=config.LOG_LEVEL, format=config.LOG_FORMAT)

# Page Config
st.set_page_config(page_title="BidBoard", page_icon="💼", layout="wide")

RECOMMENDATION_COLORS = {"STRONG BID": "green", "BID": "blue", "CONSIDER": "orange", "SKIP": "red"}


# --- HELPER FUNCTIONS ---
def time_since(posted: datetime) -> str:
    hours = int((datetime.now(timezone.utc) - posted).total_seconds() // 3600)
    if hours < 1:
        return "Just now"
    if hours < 24:
        return f"{hours}h ago"
    days = hours // 24
    return "Yesterday" if days == 1 else f"{days}d ago"


def scored_frame(scored_projects) -> pd.DataFrame:
    return pd.DataFrame([
        {
            "Title": s.project.title,
            "Category": s.project.category,
            "Budget": s.project.budget,
            "Skill Match %": s.fit.skill_match,
            "Score": s.fit.recommendation_score,
            "Recommendation": s.fit.recommendation,
        }
        for s in scored_projects
    ])


# --- INITIALIZE SESSION STATE ---
if "board" not in st.session_state:
    st.session_state["board"] = BidBoard(JsonStore(config.SETTINGS_FILE))
    st.session_state["board"].refresh()

board: BidBoard = st.session_state["board"]

# Refetch on the next interaction once the refresh interval has passed
if board.last_refresh and (datetime.now(timezone.utc) - board.last_refresh).total_seconds() > config.REFRESH_INTERVAL_SECONDS:
    board.refresh()

# --- SIDEBAR ---
with st.sidebar:
    st.header("💼 BidBoard")
    status_icon = {"online": "🟢", "offline": "🔴"}.get(board.status, "🟡")
    st.markdown(f"{status_icon} Job source **{board.status}**")
    if board.last_refresh:
        st.caption(f"Last refresh: {time_since(board.last_refresh)}")
    if st.button("🔄 Refresh", use_container_width=True):
        with st.spinner("Fetching projects..."):
            board.refresh()
        st.rerun()

    stats = board.stats()
    st.metric("Projects", stats.total)
    st.metric("Avg Match", f"{stats.avg_match}%")
    st.metric("Potential Value", f"${stats.potential:,.0f}")

st.title("🤖 BidBoard: Opportunity Command Center")

tab_projects, tab_insights, tab_proposals, tab_settings = st.tabs([
    "🚀 Projects", "📈 Insights", "✍️ Proposals", "⚙️ Settings"
])

# --- TAB 1: PROJECTS ---
with tab_projects:
    c1, c2, c3 = st.columns([2, 2, 1])
    category = c1.selectbox("Category", ["all", "saved"] + board.offerings.names())
    search = c2.text_input("Search", placeholder="title or description")
    sort_by = c3.selectbox("Sort by", SORT_KEYS)

    for item in board.visible_projects(category, search, sort_by):
        if item.is_instruction:
            st.warning(f"**{item.title}**\n\n{item.description}")
            continue

        fit = board.assess(item)
        color = RECOMMENDATION_COLORS[fit.recommendation]
        saved = item.id in board.saved
        header = f"**:{color}[{fit.recommendation} {fit.recommendation_score}]** {item.title} · {item.budget}"

        with st.expander(("⭐ " if saved else "") + header):
            left, right = st.columns([3, 1])
            with left:
                st.caption(f"{item.category} · {time_since(item.posted_date)} · {item.country or 'Unknown location'} · match {item.match_score}%")
                st.write(item.description)
                st.markdown(
                    f"**Skill match:** {fit.skill_match}% · **Budget:** {fit.budget_tier} · "
                    f"**Complexity:** {fit.complexity} · **Timeline:** {fit.timeline} · **Client:** {fit.client_score}"
                )
                if fit.matched_skills:
                    st.success("Have: " + ", ".join(fit.matched_skills))
                if fit.missing_skills:
                    st.error("Missing: " + ", ".join(fit.missing_skills))
                note = st.text_area("Team notes", value=board.notes.get(item.id, ""), key=f"note_{item.id}")
                if note != board.notes.get(item.id, ""):
                    board.set_note(item.id, note)
                st.markdown(f"[🔗 **Open listing**]({item.link})")

            with right:
                if st.button("Unsave" if saved else "⭐ Save", key=f"save_{item.id}"):
                    board.toggle_saved(item)
                    st.rerun()
                applied = st.checkbox("Applied", value=item.id in board.applied, key=f"applied_{item.id}")
                if applied != (item.id in board.applied):
                    board.mark_applied(item.id, applied)
                rate = st.number_input(
                    "Rate $/hr", min_value=0.0, value=float(board.offerings.rate_for(item.category)),
                    key=f"rate_{item.id}",
                )
                if st.button("✍️ Draft Proposal", key=f"draft_{item.id}"):
                    with st.spinner("Generating..."):
                        board.generate_proposal(item, rate=rate or None)
                    st.rerun()

            proposal = board.proposals.get(item.id)
            if proposal:
                st.markdown(f"**Proposal** (${format_amount(proposal.rate)}/hr × {proposal.estimated_hours}h = ${proposal.estimated_cost:,.0f})")
                st.text_area("Draft", value=proposal.proposal, height=250, key=f"draft_text_{item.id}")
                st.download_button("⬇️ Download", proposal.proposal, file_name=f"proposal_{item.id[-12:]}.txt", key=f"dl_{item.id}")

# --- TAB 2: INSIGHTS ---
with tab_insights:
    insights = board.insights()
    if not insights.total:
        st.info("Run a search first.")
    else:
        dist = pd.DataFrame(
            [{"Recommendation": k, "Projects": insights.recommendation_counts[k]} for k in RECOMMENDATIONS]
        )
        chart = alt.Chart(dist).mark_bar().encode(
            x=alt.X("Recommendation", sort=list(RECOMMENDATIONS)),
            y="Projects",
            color=alt.Color(
                "Recommendation",
                scale=alt.Scale(domain=list(RECOMMENDATION_COLORS), range=list(RECOMMENDATION_COLORS.values())),
                legend=None,
            ),
        )
        c1, c2 = st.columns(2)
        with c1:
            st.subheader("Recommendations")
            st.altair_chart(chart, use_container_width=True)
        with c2:
            st.subheader("Breakdown")
            breakdown = pd.DataFrame({
                "Budget": {k: len(v) for k, v in insights.by_budget_tier.items()},
                "Complexity": {k: len(v) for k, v in insights.by_complexity.items()},
            })
            st.dataframe(breakdown)
            st.dataframe(pd.Series({k: len(v) for k, v in insights.by_timeline.items()}, name="Timeline"))

        for title, rows in (
            ("🏆 Top Recommended", insights.top_recommended),
            ("⚡ Quick Wins", insights.quick_wins),
            ("💰 High Budget", insights.high_budget),
            ("🎯 Best Skill Matches", insights.best_skill_matches),
        ):
            st.subheader(title)
            if rows:
                st.dataframe(scored_frame(rows), use_container_width=True, hide_index=True)
            else:
                st.caption("Nothing here yet.")

        gap = insights.skills_gap
        st.subheader("🧩 Skills Gap")
        g1, g2, g3 = st.columns(3)
        g1.metric("Coverage", f"{gap.coverage}%")
        g2.metric("Missing skill mentions", gap.missing_demand)
        g3.metric("Est. missed revenue", f"${gap.missed_revenue:,.0f}")
        if gap.missing:
            st.dataframe(
                pd.DataFrame([{"Skill": s.name, "Demand": s.demand, "Projects": ", ".join(s.projects[:3])} for s in gap.missing]),
                use_container_width=True, hide_index=True,
            )

# --- TAB 3: PROPOSALS ---
with tab_proposals:
    if not board.proposals:
        st.info("No proposals drafted yet.")
    for project_id, proposal in board.proposals.items():
        project = board.project(project_id)
        label = project.title if project else project_id
        with st.expander(("⚠️ " if proposal.is_error else "✉️ ") + label):
            st.caption(f"Generated {proposal.generated_at:%Y-%m-%d %H:%M} · ${proposal.estimated_cost:,.0f}")
            st.write(proposal.proposal)
            analysis = proposal.analysis
            if analysis.key_points:
                st.markdown("**Key points:** " + "; ".join(analysis.key_points))
            if analysis.timeline:
                st.markdown(f"**Timeline:** {analysis.timeline}")
            if analysis.risks:
                st.markdown("**Risks:** " + "; ".join(analysis.risks))
            if project and st.button("🔁 Regenerate", key=f"regen_{project_id}"):
                with st.spinner("Generating..."):
                    board.generate_proposal(project, rate=proposal.rate)
                st.rerun()
            if st.button("🗑️ Discard", key=f"discard_{project_id}"):
                board.discard_proposal(project_id)
                st.rerun()

    if board.saved and st.button("📤 Export saved projects to Google Sheets"):
        if board.export_saved():
            st.toast("📝 Exported to Google Sheet!")
        else:
            st.error("Export failed. Check credentials/sheet sharing in the logs.")

# --- TAB 4: SETTINGS ---
with tab_settings:
    st.subheader("👤 You")
    name = st.text_input("Display name (used as [NAME] in proposals)", value=board.user_name)
    if name != board.user_name:
        board.set_user_name(name)

    st.subheader("✉️ Proposal Template")
    st.caption("Placeholders: [RATE], [HOURS], [TOTAL], [NAME], [CATEGORY]")
    template = st.text_area("Template", value=board.template, height=250)
    if st.button("💾 Save Template"):
        board.set_template(template)
        st.success("✅ Saved!")

    st.subheader("🧰 Service Offerings")
    for offering in list(board.offerings):
        with st.expander(offering.name):
            with st.form(f"offering_{offering.name}"):
                new_name = st.text_input("Name", value=offering.name)
                keywords = st.text_input("Keywords (comma separated)", value=", ".join(offering.keywords))
                skills = st.text_input("Skills (comma separated)", value=", ".join(offering.skills))
                r1, r2 = st.columns(2)
                rate_min = r1.number_input("Min rate", min_value=0.0, value=offering.rate_min)
                rate_max = r2.number_input("Max rate", min_value=0.0, value=offering.rate_max)
                if st.form_submit_button("💾 Save"):
                    try:
                        board.update_offering(
                            offering.name, name=new_name, keywords=keywords, skills=skills,
                            rate_min=rate_min, rate_max=rate_max,
                        )
                        st.rerun()
                    except (KeyError, ValueError) as e:
                        st.error(str(e))
            if st.button("🗑️ Delete", key=f"del_{offering.name}"):
                board.delete_offering(offering.name)
                st.rerun()

    b1, b2 = st.columns(2)
    if b1.button("➕ Add Offering"):
        board.add_offering()
        st.rerun()
    if b2.button("↩️ Reset to defaults"):
        board.reset_offerings()
        st.rerun()
