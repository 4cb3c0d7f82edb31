import streamlit as st
import requests
import pandas as pd

from config import API_BASE_URL, CURRENCY_SYMBOL

# Configure Streamlit page
st.set_page_config(
    page_title="SettleUp",
    page_icon="💸",
    layout="wide",
    initial_sidebar_state="expanded"
)

# Custom CSS for better styling
st.markdown("""
<style>
    .main-header {
        font-size: 3rem;
        color: #1f77b4;
        text-align: center;
        margin-bottom: 2rem;
    }
    .success-box {
        padding: 1rem;
        border-radius: 0.5rem;
        background-color: #d4edda;
        border: 1px solid #c3e6cb;
        color: #155724;
    }
    .error-box {
        padding: 1rem;
        border-radius: 0.5rem;
        background-color: #f8d7da;
        border: 1px solid #f5c6cb;
        color: #721c24;
    }
</style>
""", unsafe_allow_html=True)


def check_api_connection():
    """Check if the FastAPI server is running"""
    try:
        response = requests.get(f"{API_BASE_URL}/", timeout=5)
        return response.status_code == 200
    except requests.RequestException:
        return False


def get_groups():
    """Fetch all groups from the API"""
    try:
        response = requests.get(f"{API_BASE_URL}/groups/", timeout=10)
        if response.status_code == 200:
            return response.json()
        return []
    except requests.RequestException:
        return []


def call_api(method, path, **kwargs):
    """Send a request and return (payload, ok)"""
    try:
        response = requests.request(method, f"{API_BASE_URL}{path}", timeout=10, **kwargs)
    except requests.RequestException as e:
        return {"detail": str(e)}, False
    if response.status_code == 204:
        return {}, True
    return response.json(), response.ok


def show_error(result):
    st.markdown(
        f'<div class="error-box">❌ <strong>Request failed:</strong> {result.get("detail", "Unknown error")}</div>',
        unsafe_allow_html=True
    )


def pick_group(groups):
    options = {f"{g['name']} ({len(g['members'])} members)": g for g in groups}
    choice = st.selectbox("👥 Group", options=list(options.keys()))
    return options[choice]


# Main App
def main():
    st.markdown('<h1 class="main-header">💸 SettleUp</h1>', unsafe_allow_html=True)

    if not check_api_connection():
        st.markdown(
            '<div class="error-box">❌ <strong>API Connection Error:</strong> '
            'FastAPI server is not running. Please start the server with: <code>python main.py</code></div>',
            unsafe_allow_html=True
        )
        st.stop()

    st.sidebar.title("🎛️ Control Panel")
    app_mode = st.sidebar.selectbox("Choose App Mode", ["Groups", "Expenses", "Settle Up"])

    if app_mode == "Groups":
        groups_page()
    elif app_mode == "Expenses":
        expenses_page()
    elif app_mode == "Settle Up":
        settle_up_page()


def groups_page():
    st.header("👥 Groups")

    groups = get_groups()
    if groups:
        df = pd.DataFrame([{
            "Name": g["name"],
            "Members": ", ".join(g["members"]),
            "Expenses": len(g["expenses"]),
            "Total": f"{CURRENCY_SYMBOL}{g['total_expenses']:.2f}",
        } for g in groups])
        st.dataframe(df, use_container_width=True)
    else:
        st.info("No groups yet. Create your first group to get started!")

    st.subheader("➕ Create Group")
    name = st.text_input("Group name")
    members_raw = st.text_input("Members (comma separated)")
    if st.button("Create Group", type="primary"):
        members = [m.strip() for m in members_raw.split(",") if m.strip()]
        result, ok = call_api("POST", "/groups/", json={"name": name, "members": members})
        if ok:
            st.success(f"✅ Group '{result['name']}' created")
        else:
            show_error(result)

    if groups:
        st.subheader("✏️ Edit Group")
        group = pick_group(groups)
        new_name = st.text_input("New name", value=group["name"])
        new_members = st.text_input("Members", value=", ".join(group["members"]))
        col1, col2 = st.columns(2)
        with col1:
            if st.button("Save Changes"):
                members = [m.strip() for m in new_members.split(",") if m.strip()]
                result, ok = call_api("PUT", f"/groups/{group['id']}", json={"name": new_name, "members": members})
                if ok:
                    st.success("✅ Group updated")
                else:
                    show_error(result)
        with col2:
            if st.button("Delete Group"):
                result, ok = call_api("DELETE", f"/groups/{group['id']}")
                if ok:
                    st.success("🗑️ Group deleted")
                else:
                    show_error(result)


def expenses_page():
    st.header("🧾 Expenses")

    groups = get_groups()
    if not groups:
        st.info("Create a group first.")
        return
    group = pick_group(groups)

    if group["expenses"]:
        expenses = sorted(group["expenses"], key=lambda e: e["date"], reverse=True)
        df = pd.DataFrame([{
            "Name": e["name"],
            "Amount": f"{CURRENCY_SYMBOL}{e['amount']:.2f}",
            "Paid By": e["paid_by"],
            "Split Between": ", ".join(e["split_between"]),
            "Per Person": f"{CURRENCY_SYMBOL}{e['per_person_amount']:.2f}",
            "Date": e["date"].split("T")[0],
        } for e in expenses])
        st.dataframe(df, use_container_width=True)

    st.subheader("➕ Add Expense")
    col1, col2 = st.columns(2)
    with col1:
        name = st.text_input("Expense name")
        amount = st.number_input("Amount", min_value=0.0, step=1.0)
    with col2:
        paid_by = st.selectbox("💳 Who paid?", options=group["members"])
        split_between = st.multiselect("👥 Split between", options=group["members"], default=group["members"])

    if st.button("Add Expense", type="primary"):
        if not split_between:
            st.error("❌ Please select at least one person to split the expense with.")
            return
        result, ok = call_api("POST", f"/groups/{group['id']}/expenses", json={
            "name": name,
            "amount": amount,
            "paid_by": paid_by,
            "split_between": split_between,
        })
        if ok:
            st.success("✅ Expense added")
        else:
            show_error(result)


def settle_up_page():
    st.header("⚖️ Settle Up")

    groups = get_groups()
    if not groups:
        st.info("Create a group first.")
        return
    group = pick_group(groups)

    result, ok = call_api("GET", f"/groups/{group['id']}/settlements")
    if not ok:
        show_error(result)
        return

    st.metric("💰 Total Expenses", f"{CURRENCY_SYMBOL}{group['total_expenses']:.2f}")

    if result["settled"]:
        st.markdown('<div class="success-box">🎉 <strong>All settled up!</strong></div>', unsafe_allow_html=True)
    else:
        for transfer in result["transfers"]:
            st.write(f"**{transfer['from']}** → **{transfer['to']}**: {CURRENCY_SYMBOL}{transfer['amount']:.2f}")

    if result["balances"]:
        with st.expander("📊 Balances"):
            df = pd.DataFrame(
                [{"Member": m, "Balance": round(b, 2)} for m, b in result["balances"].items()]
            )
            st.dataframe(df, use_container_width=True)

    share, ok = call_api("GET", f"/groups/{group['id']}/share")
    if ok:
        with st.expander("🔗 Share"):
            st.text_area("Share text", value=share["text"], height=250)


if __name__ == "__main__":
    main()
