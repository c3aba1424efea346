import streamlit as st
import requests
from datetime import datetime

from app.config import settings
from app.utils.formatters import DISCLAIMER

st.set_page_config(
    page_title="Health Record Assistant",
    page_icon="🏥",
    layout="wide"
)

st.markdown('<h1 style="text-align: center;">🏥 Health Record Assistant</h1>', unsafe_allow_html=True)
st.markdown("**Document analysis for prescriptions, lab reports and scans**")

API_URL = settings.api_url
UPLOAD_TYPES = ['pdf', 'jpg', 'jpeg', 'png', 'dcm']

if 'chat_history' not in st.session_state:
    st.session_state.chat_history = []

with st.sidebar:
    st.header("📊 System Status")

    try:
        health = requests.get(f"{API_URL}/", timeout=5).json()
        st.success(f"✅ API Online (v{health.get('version', '?')})")
    except requests.RequestException:
        st.error("❌ API Offline")

    st.divider()
    st.caption(DISCLAIMER)


def post_file(endpoint, uploaded_file):
    files = {'file': (uploaded_file.name, uploaded_file.getvalue(), uploaded_file.type)}
    return requests.post(f"{API_URL}{endpoint}", files=files, timeout=settings.analysis_timeout + 10)


def show_list(title, items):
    if items:
        st.markdown(f"**{title}**")
        for item in items:
            st.markdown(f"- {item}")


tab1, tab2 = st.tabs(["📤 Analyze Document", "💬 Chatbot"])

with tab1:
    st.header("Upload Medical Document")

    uploaded_file = st.file_uploader(
        "Choose a document (PDF, JPG, PNG, DICOM)",
        type=UPLOAD_TYPES,
        key="analyze_upload"
    )

    if uploaded_file and st.button("🚀 Analyze", type="primary"):
        with st.spinner("⏳ Extracting and analyzing..."):
            try:
                response = post_file("/api/ai/analyze", uploaded_file)
                data = response.json()

                if response.status_code != 200:
                    st.error(data.get('message', 'Analysis failed'))
                else:
                    summary = data['summary']
                    prescription = data['prescription']
                    plan = data['lifestylePlan']

                    st.warning(DISCLAIMER)
                    if summary['redFlags']:
                        st.error("⚠️ " + "; ".join(summary['redFlags']))

                    col1, col2, col3 = st.columns(3)
                    with col1:
                        st.subheader("🩺 Key Vitals")
                        for key, value in summary['keyVitals'].items():
                            st.metric(key, value)
                        for key, value in prescription['vitals'].items():
                            st.text(f"{key}: {value}")
                    with col2:
                        st.subheader("📋 Possible Conditions")
                        show_list("Detected", summary['possibleConditions'])
                        show_list("Suggestions", summary['suggestions'])
                    with col3:
                        st.subheader("💊 Medications")
                        for med in prescription['medications']:
                            details = " • ".join(
                                med[k] for k in ('strength', 'frequency', 'duration') if med.get(k)
                            )
                            st.markdown(f"**{med['name']}** {details}")
                            for note in med['notes']:
                                st.caption(note)
                        show_list("Instructions", prescription['instructions'])

                    st.subheader("🌱 Lifestyle Plan")
                    col1, col2 = st.columns(2)
                    with col1:
                        show_list("Diet focus", plan['diet']['focus'])
                        show_list("Avoid", plan['diet']['avoid'])
                        show_list("Diet tips", plan['diet']['tips'])
                        show_list("Monitoring", plan['monitoring']['checks'])
                    with col2:
                        st.markdown(f"**Sleep:** {plan['sleep']['targetHours']}, {plan['sleep']['schedule']}")
                        st.markdown(f"**Hydration:** {plan['hydration']['targetLiters']}")
                        st.markdown(f"**Activity:** {plan['activity']['targetMinutesPerWeek']} min/week")
                        show_list("Activity tips", plan['activity']['tips'] + plan['activity']['cautions'])
                        show_list("Reminders", plan['reminders']['meds'] + plan['reminders']['general'])

                    with st.expander("📄 Extracted text"):
                        st.text(data['extractedText'])

            except requests.RequestException as e:
                st.error(f"Error: {str(e)}")

with tab2:
    st.header("💬 Chatbot")

    chat_file = st.file_uploader(
        "Share a prescription or report with the assistant",
        type=UPLOAD_TYPES,
        key="chat_upload"
    )

    if chat_file and st.button("📨 Send", type="primary"):
        with st.spinner("🤔 Reading your document..."):
            try:
                response = post_file("/api/chatbot/analyze", chat_file)
                data = response.json()
                reply = data['reply'] if response.status_code == 200 else "Sorry, I could not analyze that file."

                st.session_state.chat_history.append({
                    'file': chat_file.name,
                    'reply': reply,
                    'time': datetime.now().strftime("%H:%M:%S")
                })
                st.rerun()

            except requests.RequestException as e:
                st.error(f"Error: {str(e)}")

    if st.session_state.chat_history:
        st.subheader("💬 Conversation History")

        for chat in reversed(st.session_state.chat_history[-5:]):
            st.markdown(f"**You:** 📎 {chat['file']}")
            st.text(chat['reply'])
            st.caption(f"⏰ {chat['time']}")
            st.divider()

    st.caption(DISCLAIMER)
