#!/usr/bin/env python3
"""
Pantrify - Main Application Entry Point

Pantry and recipe tracker: keep an inventory of ingredients, save recipes,
and see which ones can be cooked right now.
"""

import sys
from datetime import datetime
from pathlib import Path

import pandas as pd
import streamlit as st
from dotenv import load_dotenv

# Load environment variables
load_dotenv()

# Add the project root to the path
sys.path.insert(0, str(Path(__file__).parent))

from services import (
    get_database_service, get_auth_service, get_pantry_service, get_recipe_service,
    get_search_service, get_unit_classifier, LoginMethod, RecipeCategory,
    unit_options, default_unit, convert_quantity, rank_search_results
)
from utils import get_config, setup_logging, get_logger

logger = get_logger("main")


def get_services():
    """Create services once per Streamlit session"""
    if 'services' not in st.session_state:
        config = get_config()
        config.ensure_directories()
        setup_logging(config)
        db = get_database_service(config.database_path)
        st.session_state.services = {
            'db': db,
            'auth': get_auth_service(db),
            'pantry': get_pantry_service(db),
            'recipes': get_recipe_service(db),
            'search': get_search_service(),
            'classifier': get_unit_classifier(),
        }
        logger.info(f"Services initialized with database {config.database_path}")
    return st.session_state.services


def current_user():
    return st.session_state.get('user')


def start_session(user):
    st.session_state.user = user
    st.session_state.session_started_at = datetime.now()


def end_session(auth_service):
    user = current_user()
    started_at = st.session_state.get('session_started_at')
    if user and started_at:
        auth_service.record_session(user.id, started_at)
    for key in ('user', 'session_started_at', 'search_result', 'search_future'):
        st.session_state.pop(key, None)


# Authentication

def login_page(auth_service):
    st.markdown("### 🔐 Sign In")
    login_tab, signup_tab = st.tabs(["Log In", "Sign Up"])

    with login_tab:
        method = st.radio("Log in with", [m.value for m in LoginMethod], horizontal=True)
        with st.form("login_form"):
            identifier = st.text_input(method)
            password = st.text_input("Password", type="password")
            submitted = st.form_submit_button("Log In", type="primary")

        if submitted:
            result = auth_service.authenticate_user(identifier, password, LoginMethod(method))
            if result.success:
                start_session(result.user)
                st.rerun()
            else:
                st.error(result.error)

    with signup_tab:
        with st.form("signup_form"):
            col1, col2 = st.columns(2)
            with col1:
                first_name = st.text_input("First name *")
                email = st.text_input("Email *")
                password = st.text_input("Password *", type="password")
                phone = st.text_input("Phone number")
            with col2:
                last_name = st.text_input("Last name *")
                username = st.text_input("Username *")
                confirm = st.text_input("Confirm password *", type="password")
                sex = st.selectbox("Sex", ["", "Female", "Male", "Other"])
            date_of_birth = st.date_input("Date of birth", value=None)
            submitted = st.form_submit_button("Create Account", type="primary")

        if submitted:
            result = auth_service.register_user(
                first_name, last_name, email, username, password, confirm,
                phone_number=phone, date_of_birth=date_of_birth, sex=sex
            )
            if result.success:
                start_session(result.user)
                st.rerun()
            else:
                for error in result.errors:
                    st.error(error)


# Pantry

def _convert_add_quantity():
    """Unit selectbox callback: re-express the entered quantity in the new unit"""
    previous = st.session_state.get('add_prev_unit')
    selected = st.session_state.get('add_unit')
    category = st.session_state.get('add_category')
    if previous and selected and previous != selected:
        st.session_state.add_quantity = convert_quantity(
            st.session_state.get('add_quantity', 0.0), previous, selected, category
        )
    st.session_state.add_prev_unit = selected


def _apply_detected_category(classifier):
    """Pick up a finished classification if it is still the latest one"""
    future = st.session_state.get('classify_future')
    if future is None or not future.done():
        return
    st.session_state.pop('classify_future')
    if future.cancelled() or not classifier.is_current(future):
        return
    category = future.result()
    st.session_state.add_category = category
    st.session_state.add_unit = default_unit(category)
    st.session_state.add_prev_unit = st.session_state.add_unit


def pantry_page(pantry_service, classifier, user):
    st.markdown("### 🥬 My Pantry")
    st.caption(pantry_service.get_pantry_summary(user.id))

    with st.expander("➕ Add Ingredient", expanded=False):
        name = st.text_input("Ingredient name", key="add_name")

        if st.button("🔍 Detect unit", disabled=not name.strip()):
            st.session_state.classify_future = classifier.classify_async(name.strip())

        future = st.session_state.get('classify_future')
        if future is not None:
            with st.spinner("Detecting unit..."):
                future.result()
            _apply_detected_category(classifier)

        category = st.session_state.get('add_category')
        if category:
            st.caption(f"Measured in **{category}**")

        col1, col2 = st.columns(2)
        with col1:
            st.number_input("Quantity", min_value=0.0, step=1.0, key="add_quantity")
        with col2:
            st.selectbox("Unit", unit_options(category), key="add_unit", on_change=_convert_add_quantity)

        if st.button("Add to Pantry", type="primary"):
            ingredient, error = pantry_service.add_ingredient(
                user.id, name, category,
                st.session_state.get('add_unit'), st.session_state.get('add_quantity', 0.0)
            )
            if error:
                st.error(error)
            else:
                st.success(f"Added {ingredient.name}")
                for key in ('add_name', 'add_category', 'add_unit', 'add_prev_unit', 'add_quantity'):
                    st.session_state.pop(key, None)
                st.rerun()

    items = pantry_service.get_user_pantry(user.id)
    if not items:
        st.info("Your pantry is empty. Add an ingredient to get started.")
        return

    df = pd.DataFrame([
        {"Ingredient": item.name, "Quantity": round(item.quantity, 2), "Unit": item.unit,
         "Measured in": item.unit_category}
        for item in items
    ])
    st.dataframe(df, use_container_width=True, hide_index=True)

    st.markdown("#### Adjust Quantities")
    for item in items:
        col1, col2, col3, col4, col5 = st.columns([4, 2, 1, 1, 1])
        with col1:
            st.write(f"**{item.name}**")
        with col2:
            st.write(item.get_display_quantity())
        with col3:
            if st.button("➖", key=f"dec_{item.id}"):
                _, removed = pantry_service.decrement(item.id)
                if removed:
                    st.toast(f"Removed {item.name}")
                st.rerun()
        with col4:
            if st.button("➕", key=f"inc_{item.id}"):
                pantry_service.increment(item.id)
                st.rerun()
        with col5:
            if st.button("🗑️", key=f"del_{item.id}"):
                pantry_service.remove_ingredient(item.id)
                st.rerun()


# Recipes

def render_recipe_detail(recipe_service, recipe, user):
    readiness = recipe_service.get_readiness(recipe, user.id)
    availability = recipe_service.get_ingredient_availability(recipe, user.id)
    st.markdown(f"**Ingredients** ({readiness.have}/{readiness.total} in pantry)")
    for line in availability:
        st.write(f"{'✅' if line.available else '❌'} {line.display}")

    st.markdown("**Instructions**")
    for number, step in enumerate(recipe.instructions, 1):
        st.write(f"{number}. {step}")

    if recipe.tags:
        st.caption("Tags: " + ", ".join(recipe.tags))
    if recipe.source_url:
        st.markdown(f"[Source]({recipe.source_url})")


def recipes_page(recipe_service, user):
    st.markdown("### 📚 My Recipes")

    category = RecipeCategory(st.radio(
        "Category", [c.value for c in RecipeCategory], horizontal=True, label_visibility="collapsed"
    ))
    view = recipe_service.get_library_view(user.id, category)
    st.caption(view.subtitle)

    if not view.matches:
        st.info("No recipes yet. Find some under Add Recipes.")

    for match in view.matches:
        recipe = match.recipe
        icon = "🟢" if match.can_make else "🟠"
        with st.expander(f"{icon} {recipe.title} · {match.score.badge}"):
            st.write(match.score.summary)

            col1, col2, col3 = st.columns(3)
            with col1:
                planned = st.checkbox("Planned", value=recipe.is_planned, key=f"plan_{recipe.id}")
                if planned != recipe.is_planned:
                    recipe_service.set_planned(recipe.id, planned)
                    st.rerun()
            with col2:
                cooked = st.checkbox("Cooked", value=recipe.is_cooked, key=f"cook_{recipe.id}")
                if cooked != recipe.is_cooked:
                    recipe_service.set_cooked(recipe.id, cooked)
                    st.rerun()
            with col3:
                if st.button("🗑️ Delete", key=f"delete_recipe_{recipe.id}"):
                    recipe_service.delete_recipe(recipe.id)
                    st.rerun()

            render_recipe_detail(recipe_service, recipe, user)

    with st.expander("✍️ Add a Recipe Manually"):
        with st.form("manual_recipe_form"):
            title = st.text_input("Title")
            ingredients = st.text_area("Ingredients (one per line)")
            instructions = st.text_area("Instructions (one step per line)")
            tags = st.text_input("Tags (comma separated)")
            submitted = st.form_submit_button("Save Recipe", type="primary")

        if submitted:
            recipe, error = recipe_service.create_recipe(
                user.id, title,
                [line for line in ingredients.splitlines() if line.strip()],
                instructions.splitlines(),
                tags=tags.split(",")
            )
            if error:
                st.error(error)
            else:
                st.success(f"Saved {recipe.title}")
                st.rerun()


def add_recipes_page(search_service, pantry_service, recipe_service, user):
    st.markdown("### 🔎 Add Recipes")

    with st.form("search_form"):
        query = st.text_input("Search recipes", placeholder="e.g. chicken, pasta, curry")
        submitted = st.form_submit_button("Search", type="primary")

    if submitted:
        st.session_state.search_future = search_service.search_async(query)

    future = st.session_state.get('search_future')
    if future is not None:
        with st.spinner("Searching recipes..."):
            result = future.result()
        if search_service.is_current(future):
            st.session_state.search_result = result
        st.session_state.pop('search_future', None)

    result = st.session_state.get('search_result')
    if result is None:
        return

    if not result.success:
        st.error(result.error)
        return

    st.caption(result.get_status_summary())
    prioritize = st.toggle("Show recipes I can make first", value=True)
    pantry_keys = pantry_service.get_pantry_keys(user.id)

    for index, match in enumerate(rank_search_results(result.results, pantry_keys, prioritize)):
        hit = match.recipe
        with st.container(border=True):
            col1, col2 = st.columns([4, 1])
            with col1:
                st.markdown(f"**{hit.title}**  \n{match.score.badge}")
                st.caption(match.score.summary)
            with col2:
                if st.button("Import", key=f"import_{hit.id}_{index}"):
                    saved, error = recipe_service.import_recipe(hit, user.id)
                    if error:
                        st.error(error)
                    else:
                        st.success(f"Added {saved.title} to your recipes")
            if hit.link:
                st.markdown(f"[View original]({hit.link})")


# Profile

def profile_page(auth_service, recipe_service, pantry_service, user):
    refreshed = auth_service.db.get_user_by_id(user.id) or user
    st.markdown(f"### 👤 {refreshed.get_display_name()}")
    st.caption(f"@{refreshed.username} · Member since {refreshed.get_join_date_label()}")

    library = recipe_service.get_library_view(user.id)
    col1, col2, col3, col4, col5 = st.columns(5)
    with col1:
        st.metric("Recipes Saved", library.total_count)
    with col2:
        st.metric("Ingredients", len(pantry_service.get_user_pantry(user.id)))
    with col3:
        st.metric("Ready to Cook", library.ready_count)
    with col4:
        st.metric("Recipes Cooked", recipe_service.get_cooked_count(user.id))
    with col5:
        st.metric("Hours in Pantrify", f"{refreshed.hours_spent:.1f}")

    with st.expander("✏️ Personal Information", expanded=False):
        with st.form("edit_details_form"):
            col1, col2 = st.columns(2)
            with col1:
                first_name = st.text_input("First name", value=refreshed.first_name)
                username = st.text_input("Username", value=refreshed.username)
                phone = st.text_input("Phone number", value=refreshed.phone_number or "")
            with col2:
                last_name = st.text_input("Last name", value=refreshed.last_name)
                email = st.text_input("Email", value=refreshed.email)
            submitted = st.form_submit_button("Save Details", type="primary")
        if submitted:
            result = auth_service.update_profile(user.id, first_name, last_name, username, email, phone)
            if result.success:
                st.session_state.user = result.user
                st.success("Details saved")
                st.rerun()
            else:
                st.error(result.error)

    with st.expander("🔑 Change Password"):
        with st.form("change_password_form"):
            new_password = st.text_input("New password", type="password")
            confirm = st.text_input("Confirm new password", type="password")
            submitted = st.form_submit_button("Update Password")
        if submitted:
            result = auth_service.change_password(user.id, new_password, confirm)
            if result.success:
                st.success("Password updated")
            else:
                st.error(result.error)

    col1, col2 = st.columns(2)
    with col1:
        if st.button("🚪 Log Out"):
            end_session(auth_service)
            st.rerun()
    with col2:
        with st.popover("⚠️ Delete Account"):
            st.warning("This removes your pantry and recipes permanently.")
            if st.button("Delete my account", type="primary"):
                if auth_service.delete_account(user.id):
                    for key in ('user', 'session_started_at', 'search_result', 'search_future'):
                        st.session_state.pop(key, None)
                    st.rerun()
                else:
                    st.error("Failed to delete account. Please try again.")


def main():
    """Main application entry point"""
    st.set_page_config(
        page_title="Pantrify",
        page_icon="🥕",
        layout="wide",
        initial_sidebar_state="expanded"
    )

    services = get_services()
    st.title("🥕 Pantrify")

    user = current_user()
    if user is None:
        login_page(services['auth'])
        return

    page = st.sidebar.radio("Navigate", ["Pantry", "Recipes", "Add Recipes", "Profile"])
    st.sidebar.caption(f"Signed in as {user.username}")

    if page == "Pantry":
        pantry_page(services['pantry'], services['classifier'], user)
    elif page == "Recipes":
        recipes_page(services['recipes'], user)
    elif page == "Add Recipes":
        add_recipes_page(services['search'], services['pantry'], services['recipes'], user)
    else:
        profile_page(services['auth'], services['recipes'], services['pantry'], user)


if __name__ == "__main__":
    main()
