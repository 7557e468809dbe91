import streamlit as st
from streamlit_image_comparison import image_comparison

from app_config.constants import CanvasConfig, UIConfig, UploadConfig, GeminiConfig
from clearview_core.controller import ProcessingStatus
from clearview_core.comparison import align_to_frame
from clearview_core.prompts import MODE_LABELS, mode_from_tag
from .ui.canvas import st_canvas
from .encoding import payload_to_preview_url, fit_display_size
from .async_processor import submit_edit_task
from .state_manager import (
    handle_upload, cb_reset_workspace, cb_clear_strokes, cb_edit_again, cb_move_slider
)
from .logger import logger


def setup_styles():
    """Inject the page CSS: landing cards, dimmed preview while processing, badges."""
    st.markdown("""
        <style>
        .block-container { max-width: 1150px; padding-top: 1.5rem; }
        .cv-header { display:flex; align-items:center; justify-content:space-between;
                     padding-bottom: 12px; margin-bottom: 18px; border-bottom: 1px solid #e5e7eb; }
        .cv-brand { display:flex; align-items:center; gap:10px; }
        .cv-logo { background:#2563eb; width:36px; height:36px; border-radius:8px;
                   display:flex; align-items:center; justify-content:center; color:white; font-size:18px; }
        .cv-brand h1 { margin:0; padding:0; font-size:1.25rem; font-weight:700; color:#111827; }
        .cv-brand p { margin:0; font-size:0.75rem; color:#6b7280; }
        .cv-badge { background:#dcfce7; color:#15803d; padding:2px 8px; border-radius:4px; font-size:0.75rem; }
        .cv-intro { text-align:center; margin: 24px 0 32px 0; }
        .cv-intro h2 { font-size:2rem; font-weight:700; color:#0f172a; }
        .cv-intro p { font-size:1.05rem; color:#475569; max-width:640px; margin:0 auto; }
        .cv-step { background:white; border:1px solid #f1f5f9; border-radius:12px; padding:20px; text-align:center; }
        .cv-step .num { width:40px; height:40px; border-radius:50%; background:#dbeafe; color:#2563eb;
                        font-weight:700; display:flex; align-items:center; justify-content:center; margin:0 auto 10px auto; }
        .cv-preview { position:relative; border-radius:12px; overflow:hidden; border:1px solid #e5e7eb; background:#f3f4f6; }
        .cv-preview img { display:block; max-width:100%; max-height:600px; margin:0 auto; }
        .cv-preview.processing img { opacity:0.5; filter: blur(2px); transition: all 0.7s; }
        .cv-overlay { position:absolute; inset:0; display:flex; align-items:center; justify-content:center; }
        .cv-overlay div { background:rgba(255,255,255,0.92); padding:18px 26px; border-radius:14px;
                          box-shadow:0 10px 25px rgba(0,0,0,0.12); font-weight:600; color:#374151; }
        .cv-hint { font-size:0.8rem; color:#6b7280; }
        </style>
    """, unsafe_allow_html=True)


def render_header(model_name=GeminiConfig.DEFAULT_MODEL):
    st.markdown(f"""
        <div class="cv-header">
            <div class="cv-brand">
                <div class="cv-logo">{UIConfig.PAGE_ICON}</div>
                <div><h1>{UIConfig.APP_TITLE}</h1><p>{UIConfig.APP_SUBTITLE}</p></div>
            </div>
            <span class="cv-badge">{model_name}</span>
        </div>
    """, unsafe_allow_html=True)


def render_intro():
    st.markdown("""
        <div class="cv-intro">
            <h2>Remove watermarks and text from photos in one click</h2>
            <p>Google Gemini's vision model finds logos, watermarks and unwanted text,
            erases them and rebuilds the background.</p>
        </div>
    """, unsafe_allow_html=True)


def render_features():
    steps = [
        ("1", "Upload a photo", "JPG, PNG and WEBP up to 10MB."),
        ("2", "AI processing", "Gemini locates text and watermarks and fills in the texture behind them."),
        ("3", "Download", "Compare before and after, then save the clean image."),
    ]
    cols = st.columns(3)
    for col, (num, title, text) in zip(cols, steps):
        with col:
            st.markdown(
                f"<div class='cv-step'><div class='num'>{num}</div><b>{title}</b>"
                f"<p class='cv-hint'>{text}</p></div>",
                unsafe_allow_html=True,
            )


def render_uploader():
    """Drop zone. Rejected files show an error and leave the workspace untouched."""
    uploader_key = f"uploader_{st.session_state.get('uploader_id', 0)}"
    max_mb = UploadConfig.MAX_FILE_SIZE_BYTES // (1024 * 1024)
    uploaded_file = st.file_uploader(
        "Click or drag an image here",
        type=list(UploadConfig.ACCEPTED_EXTENSIONS),
        key=uploader_key,
        help=f"Supports JPG, PNG, WEBP (max {max_mb}MB)",
    )

    if uploaded_file is not None and handle_upload(uploaded_file):
        st.toast(f"📸 Loaded {uploaded_file.name}", icon="🔄")
        st.rerun()

    if st.session_state.get("upload_error"):
        st.error(st.session_state["upload_error"])
    st.caption("💡 Works best on images with clearly visible watermarks.")


def render_mask_canvas(controller):
    """Brush surface for eraser mode. Strokes are baked into the MaskCanvas on every run."""
    canvas = st.session_state["mask_canvas"]
    if not canvas.is_loaded:
        canvas.load(controller.original)

    display_w, display_h = fit_display_size(canvas.size, CanvasConfig.DISPLAY_WIDTH, CanvasConfig.DISPLAY_MAX_HEIGHT)

    st.caption("🖌️ Paint red over the objects you want removed")
    canvas_result = st_canvas(
        background_payload=controller.original,
        fill_color="rgba(0, 0, 0, 0)",
        stroke_width=canvas.display_brush_width((display_w, display_h)),
        stroke_color=CanvasConfig.STROKE_CSS,
        drawing_mode="freedraw",
        update_streamlit=True,
        width=display_w,
        height=display_h,
        display_toolbar=False,
        key=f"mask_canvas_{st.session_state.get('canvas_id', 0)}",
    )

    # Rebuild the surface from the widget's stroke list so it matches what is on screen
    canvas.clear()
    applied = canvas.apply_canvas_json(canvas_result.json_data, (display_w, display_h))
    logger.debug(f"Canvas synced: {applied} strokes at display {display_w}x{display_h}")

    st.button("↩️ Clear strokes", on_click=cb_clear_strokes, disabled=not canvas.has_strokes)


def render_preview(controller):
    """Original image; dimmed with an overlay while a request is in flight."""
    url = payload_to_preview_url(controller.original)
    processing = controller.status == ProcessingStatus.PROCESSING
    overlay = "<div class='cv-overlay'><div>⏳ AI is cleaning up your image...</div></div>" if processing else ""
    st.markdown(
        f"<div class='cv-preview {'processing' if processing else ''}'>"
        f"<img src='{url}' alt='Original'/>{overlay}</div>",
        unsafe_allow_html=True,
    )


def render_comparison(controller):
    """Before/after slider plus the download action for the processed image."""
    slider = st.session_state["slider"]
    before, after = align_to_frame(controller.original.to_image(), controller.processed.to_image())

    image_comparison(
        img1=before,
        img2=after,
        label1="Original",
        label2="Processed",
        width=UIConfig.COMPARISON_WIDTH,
        starting_position=int(round(slider.position)),
        show_labels=True,
        make_responsive=True,
        in_memory=True,
    )

    if "slider_widget" not in st.session_state:
        st.session_state["slider_widget"] = int(round(slider.position))
    st.slider("Divider position (%)", 0, 100, key="slider_widget", on_change=cb_move_slider)

    c1, c2 = st.columns([2, 1])
    with c1:
        st.caption("Drag the slider to compare")
    with c2:
        st.download_button(
            label="📥 Download result",
            data=controller.processed.to_bytes(),
            file_name=UIConfig.DOWNLOAD_FILENAME,
            mime="image/png",
            use_container_width=True,
            type="primary",
        )


def start_edit(controller, editor):
    """Build the request from the current controls and hand it to the worker."""
    mode = mode_from_tag(st.session_state.get("edit_mode", "general"), st.session_state.get("instruction", ""))
    request = controller.build_request(mode, st.session_state["mask_canvas"])
    generation = controller.begin_processing()
    submit_edit_task(editor, request, generation)


def render_controls(controller, editor_factory):
    status = controller.status
    busy = status in (ProcessingStatus.PROCESSING, ProcessingStatus.SUCCESS)

    st.radio(
        "Mode",
        options=list(MODE_LABELS.keys()),
        format_func=MODE_LABELS.get,
        key="edit_mode",
        disabled=busy,
    )

    if st.session_state.get("edit_mode") == "general":
        st.text_area(
            "Extra instruction (optional)",
            key="instruction",
            placeholder=UIConfig.INSTRUCTION_PLACEHOLDER,
            disabled=busy,
            height=100,
        )
        st.caption("By default the AI finds and removes all text and watermarks. Describe anything specific here.")
    else:
        st.caption("Highlight what should disappear; the AI removes it and fills in the background.")

    if status == ProcessingStatus.ERROR:
        st.error(f"⚠️ {controller.error_message}")

    if status == ProcessingStatus.PROCESSING:
        label = "⏳ Processing..."
    elif status == ProcessingStatus.SUCCESS:
        label = "✅ Done"
    else:
        label = "🪄 Remove watermarks" if st.session_state.get("edit_mode") == "general" else "🪄 Erase marked areas"

    if st.button(label, type="primary", use_container_width=True, disabled=not controller.can_submit):
        editor = editor_factory()
        start_edit(controller, editor)
        st.rerun()

    if status == ProcessingStatus.SUCCESS:
        st.button("✏️ Edit this image again", on_click=cb_edit_again, use_container_width=True)


def render_workspace(controller, editor_factory):
    """Toolbar, controls column and preview / canvas / comparison column."""
    t1, t2 = st.columns([4, 1])
    with t1:
        st.markdown("#### Workspace")
    with t2:
        st.button("✖ Upload another", on_click=cb_reset_workspace, disabled=controller.is_processing)

    left, right = st.columns([1, 2])
    with left:
        render_controls(controller, editor_factory)
    with right:
        if controller.status == ProcessingStatus.SUCCESS and controller.processed is not None:
            render_comparison(controller)
        elif st.session_state.get("edit_mode") == "eraser" and not controller.is_processing:
            render_mask_canvas(controller)
        else:
            render_preview(controller)


def render_footer():
    st.divider()
    st.caption(f"© {UIConfig.APP_TITLE}. Powered by Google Gemini.")
