import functools
import logging

import streamlit as st

from wa_organizer.client import GeminiClient
from wa_organizer.config import configure_logging, load_config
from wa_organizer.counter import count_message_blocks
from wa_organizer.prompts import SORT_CHOICES, ProcessingOptions
from wa_organizer.results import combine_output, export_filename, format_count
from wa_organizer.session import OrganizeRequest, ProcessingSession
from wa_organizer.settings import Settings, SettingsStore

LOGGER = logging.getLogger("wa_organizer.app")

SORT_LABELS = {
    "original": "الترتيب الأصلي",
    "agency": "حسب الوكالة",
    "location": "حسب العنوان",
    "amount": "حسب المبلغ",
}
CONNECTION_LABELS = {
    "connected": "🟢 متصل",
    "disconnected": "🔴 غير متصل",
    "unknown": "⚪ لم يتم التحقق",
}


def _secrets():
    try:
        return dict(st.secrets)
    except Exception:  # noqa: BLE001
        # no secrets.toml
        return {}


@st.cache_resource
def _bootstrap():
    config = load_config(_secrets())
    configure_logging(config.log_level)
    store = SettingsStore(
        config.settings_path,
        defaults=Settings(api_key=config.api_key, api_endpoint=config.api_endpoint),
    )
    LOGGER.info("event=bootstrap status=finished transport=%s", config.transport)
    return config, store


def _show(notices):
    for notice in notices:
        if notice.level == "error":
            st.error(f"**{notice.title}**: {notice.message}")
        else:
            st.toast(f"{notice.title}: {notice.message}", icon="✅")


def _save_settings():
    settings = Settings(
        api_key=st.session_state.api_key,
        api_endpoint=st.session_state.api_endpoint,
    )
    store.save(settings)


def _clear_all():
    st.session_state.input_text = ""
    st.session_state.organizer.clear()


st.set_page_config(page_title="منظم رسائل واتساب", page_icon="💬", layout="wide")
config, store = _bootstrap()

# --- Session state ---

if "organizer" not in st.session_state:
    st.session_state.organizer = ProcessingSession(
        functools.partial(GeminiClient, transport=config.transport)
    )
if "api_key" not in st.session_state:
    # settings are read once per browser session
    loaded = store.load()
    st.session_state.api_key = loaded.api_key
    st.session_state.api_endpoint = loaded.api_endpoint
if "input_text" not in st.session_state:
    st.session_state.input_text = ""

organizer = st.session_state.organizer

# --- Streamlit UI ---

st.title("💬 منظم رسائل واتساب")
st.write("استخدم الذكاء الاصطناعي Gemini لترتيب وتنظيم رسائل واتساب الخاصة بوكالات العملة المشفرة")

notices = []
input_col, output_col = st.columns(2)

with input_col:
    st.subheader("⚙️ إعدادات المعالجة")

    with st.expander("إعدادات Gemini API"):
        st.text_input("مفتاح API", key="api_key", type="password", on_change=_save_settings)
        st.text_input("رابط الواجهة", key="api_endpoint", on_change=_save_settings)
        st.caption(CONNECTION_LABELS[organizer.connection_status])

    sort_by = st.selectbox(
        "ترتيب النتائج",
        SORT_CHOICES,
        format_func=SORT_LABELS.get,
    )
    merge_duplicates = st.checkbox("دمج المكرر (نفس الاسم، ايديهات مختلفة)")
    show_only_ids = st.checkbox("إظهار الايديهات فقط")

    st.divider()

    input_text = st.text_area(
        "نص رسائل واتساب",
        key="input_text",
        height=300,
        placeholder="الصق هنا رسائل واتساب المراد ترتيبها...",
    )
    count_col, blocks_col = st.columns(2)
    count_col.caption(f"عدد الأحرف: {format_count(len(input_text))}")
    blocks_col.caption(f"عدد الرسائل التقريبي: {format_count(count_message_blocks(input_text))}")

    request = OrganizeRequest(
        input_text=input_text,
        options=ProcessingOptions(
            sort_by=sort_by,
            merge_duplicates=merge_duplicates,
            show_only_ids=show_only_ids,
        ),
        api_key=st.session_state.api_key,
        api_endpoint=st.session_state.api_endpoint,
    )
    ready = not request.missing_fields()

    connect_col, process_col, clear_col = st.columns(3)
    connect_clicked = connect_col.button("📶 اتصال")
    process_clicked = process_col.button(
        "✨ معالجة الرسائل",
        type="primary",
        disabled=organizer.in_flight or not ready,
    )
    clear_col.button(
        "🗑️ مسح الكل",
        on_click=_clear_all,
        disabled=not input_text and not organizer.output_text,
    )

    if connect_clicked:
        with st.spinner("جاري التحقق..."):
            notices.extend(
                organizer.check_connection(
                    Settings(api_key=request.api_key, api_endpoint=request.api_endpoint)
                )
            )
    if process_clicked:
        with st.spinner("جاري المعالجة..."):
            notices.extend(organizer.process(request))
    elif organizer.has_processed:
        with st.spinner("جاري تحديث النتيجة..."):
            notices.extend(organizer.notify_change(request))

with output_col:
    st.subheader("📄 النتيجة المنسقة")

    if organizer.output_text:
        full_text = combine_output(organizer.output_text, organizer.summary)

        st.text_area("النتيجة", organizer.output_text, height=400, disabled=True)
        if organizer.summary:
            st.info(organizer.summary)
        st.caption(f"عدد الأحرف: {format_count(len(organizer.output_text))}")

        st.caption("نسخ")
        st.code(full_text, language=None)
        st.download_button(
            "⬇️ تحميل",
            data=full_text,
            file_name=export_filename(),
            mime="text/plain",
        )
    else:
        st.info('أدخل النص واضغط على "معالجة الرسائل" لرؤية النتيجة')

_show(notices)
