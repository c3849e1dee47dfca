import logging

import gradio as gr

from components import config

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(levelname)s - %(message)s',
    handlers=[
        logging.FileHandler(config.LOG_FILE),
        logging.StreamHandler()
    ]
)
logger = logging.getLogger(__name__)

from components.calculators import (  # noqa: E402
    EXPENSE_PERIODS,
    RANGE_COLUMNS,
    TAKE_HOME_PERIODS,
    TARGET_COLUMNS,
    busy_button,
    handle_reverse_ctc,
    handle_savings,
    handle_savings_range,
    handle_take_home,
    handle_time_to_target,
    ready_button,
    tax_api,
)
from components.theme import (  # noqa: E402
    APPLY_THEME_JS,
    LIGHT,
    READ_PREFERENCE_JS,
    THEME_CSS,
    initialize_theme,
    theme_label,
    toggle_theme,
)

APP_TITLE = "Tax Calculator (New Regime FY 2025-26)"

custom_css = THEME_CSS + """
:root {
    --border-radius: 15px;
    --border-radius-small: 8px;
    --shadow-light: 0 4px 6px rgba(0, 0, 0, 0.05);
    --transition: all 0.3s cubic-bezier(0.4, 0, 0.2, 1);
}

.gradio-container {
    max-width: 960px !important;
    margin: 0 auto !important;
    padding: 1rem !important;
    font-family: -apple-system, BlinkMacSystemFont, 'Segoe UI', 'Roboto', 'Oxygen', 'Ubuntu', 'Cantarell', sans-serif !important;
    min-height: 100vh !important;
}

.app-header {
    display: flex;
    align-items: center;
    justify-content: space-between;
    color: var(--color-text);
}

.calculator-card {
    border: 1px solid var(--color-border);
    border-radius: var(--border-radius-small);
    padding: 1.5rem;
    background: var(--color-card);
    box-shadow: var(--shadow-light);
}

.result-card {
    margin-top: 1rem;
    padding-top: 1rem;
    border-top: 1px solid var(--color-border);
    color: var(--color-text);
}

.result-divider {
    border: none;
    border-top: 1px dashed var(--color-border);
    margin: 10px 0;
}

.result-footnote {
    font-size: 0.9em;
    color: var(--color-text-secondary);
}

.status-error {
    color: var(--color-error);
    margin-top: 0.8rem;
    font-weight: 500;
}

.status-info {
    color: var(--color-info);
    margin-top: 0.8rem;
    font-style: italic;
}

.primary-btn {
    min-width: 200px !important;
    border-radius: var(--border-radius-small) !important;
    transition: var(--transition) !important;
}

.primary-btn:disabled {
    opacity: 0.6 !important;
    cursor: not-allowed !important;
}

.enhanced-table {
    border-radius: var(--border-radius-small) !important;
    overflow: hidden !important;
}

@media (max-width: 768px) {
    .gradio-container {
        padding: 0.5rem !important;
    }

    .app-header {
        flex-direction: column;
        gap: 0.5rem;
    }
}
"""

# ========== UI LAYOUT ==========
with gr.Blocks(title=APP_TITLE, theme=gr.themes.Soft(), css=custom_css) as demo:
    # Theme preference travels through hidden components so the browser-side
    # scripts can read and write it.
    theme_value = gr.Textbox(value=LIGHT, visible=False)
    stored_theme = gr.Textbox(value="", visible=False)
    prefers_dark = gr.Checkbox(value=False, visible=False)

    with gr.Row(elem_classes="app-header"):
        gr.Markdown(f"# {APP_TITLE}")
        theme_btn = gr.Button(theme_label(LIGHT), variant="secondary", size="sm", scale=0)

    with gr.Tabs(elem_classes="tab-nav"):

        # Take Home Pay Tab
        with gr.Tab("Take Home Pay"):
            with gr.Column(elem_classes="calculator-card"):
                gr.Markdown("## Take Home Pay Calculator")
                with gr.Row():
                    take_home_ctc = gr.Number(label="Annual CTC (INR)", info="e.g., 1200000", scale=4)
                    take_home_lakhs = gr.Checkbox(label="Lakhs?", value=False, scale=1)
                take_home_btn = gr.Button("Calculate", variant="primary", elem_classes="primary-btn")
                take_home_status = gr.HTML("")
                take_home_result = gr.HTML("")

        # Savings Tab
        with gr.Tab("Savings Calc"):
            with gr.Column(elem_classes="calculator-card"):
                gr.Markdown("## Savings Calculator")
                savings_lakhs = gr.Checkbox(label="Input in Lakhs?", value=False)
                savings_ctc = gr.Number(label="Annual CTC (INR)", info="e.g., 1500000")
                with gr.Row():
                    savings_period = gr.Dropdown(
                        choices=EXPENSE_PERIODS,
                        value=EXPENSE_PERIODS[0],
                        label="Expense Period",
                        scale=1
                    )
                    savings_expense = gr.Number(label="Expense (optional)", info="e.g., 40000", scale=3)
                savings_btn = gr.Button("Calculate Savings", variant="primary", elem_classes="primary-btn")
                savings_status = gr.HTML("")
                savings_result = gr.HTML("")

        # Savings Range Tab
        with gr.Tab("Savings Range"):
            with gr.Column(elem_classes="calculator-card"):
                gr.Markdown("## Savings Across CTC Range (5L Increments)")
                with gr.Row():
                    with gr.Column():
                        range_min_ctc = gr.Number(label="Min CTC (INR)", info="e.g., 1000000")
                        range_min_lakhs = gr.Checkbox(label="Lakhs?", value=False)
                    with gr.Column():
                        range_max_ctc = gr.Number(label="Max CTC (INR)", info="e.g., 3000000")
                        range_max_lakhs = gr.Checkbox(label="Lakhs?", value=False)
                    with gr.Column():
                        range_expense = gr.Number(label="Monthly Expense (INR)", info="e.g., 40000")
                        range_expense_lakhs = gr.Checkbox(label="Lakhs?", value=False)
                range_btn = gr.Button("Show Savings Range", variant="primary", elem_classes="primary-btn")
                range_status = gr.HTML("")
                range_table = gr.Dataframe(
                    headers=RANGE_COLUMNS,
                    interactive=False,
                    wrap=True,
                    elem_classes="enhanced-table"
                )

        # Time To Target Tab
        with gr.Tab("Time to Target"):
            with gr.Column(elem_classes="calculator-card"):
                gr.Markdown("## Time to Reach Savings Target")
                target_lakhs = gr.Checkbox(label="Input in Lakhs?", value=False)
                with gr.Row():
                    target_min_ctc = gr.Number(label="Min CTC (INR)", info="e.g., 1000000")
                    target_max_ctc = gr.Number(label="Max CTC (INR)", info="e.g., 3000000")
                    target_expense = gr.Number(label="Monthly Expense (INR)", info="e.g., 40000")
                with gr.Row():
                    target_amount = gr.Number(label="Target Amount (INR)", info="e.g., 5000000")
                    target_increment = gr.Number(label="Increment (INR)", info="e.g., 500000")

                with gr.Accordion("Investments & SIP (optional)", open=False):
                    with gr.Row():
                        target_investments = gr.Number(label="Current Investments (INR)")
                        target_lumpsum = gr.Number(label="Lumpsum Expenses (INR)")
                    with gr.Row():
                        target_sip = gr.Number(label="Monthly SIP Amount (INR)")
                        target_cagr = gr.Number(label="Expected SIP CAGR (%)", info="Not affected by the Lakhs option")

                target_btn = gr.Button("Generate Chart", variant="primary", elem_classes="primary-btn")
                target_status = gr.HTML("")
                target_chart = gr.Plot(label="Months to Reach Target", elem_classes="analytics-chart")
                target_table = gr.Dataframe(
                    headers=TARGET_COLUMNS,
                    interactive=False,
                    wrap=True,
                    elem_classes="enhanced-table"
                )

        # Reverse Calculator Tab
        with gr.Tab("Reverse Calculator"):
            with gr.Column(elem_classes="calculator-card"):
                gr.Markdown("## Calculate CTC from Desired Take-Home")
                reverse_period = gr.Radio(
                    choices=TAKE_HOME_PERIODS,
                    value=TAKE_HOME_PERIODS[0],
                    label="Take-Home Period"
                )
                with gr.Row():
                    reverse_amount = gr.Number(label="Desired Take-Home", info="e.g., 1500000", scale=4)
                    reverse_lakhs = gr.Checkbox(label="Lakhs?", value=False, scale=1)
                reverse_btn = gr.Button("Calculate Required CTC", variant="primary", elem_classes="primary-btn")
                reverse_status = gr.HTML("")
                reverse_result = gr.HTML("")

    # ===== EVENT HANDLERS =====

    # Theme Events
    demo.load(
        initialize_theme,
        inputs=[stored_theme, prefers_dark],
        outputs=[theme_value, theme_btn],
        js=READ_PREFERENCE_JS
    ).then(None, inputs=[theme_value], js=APPLY_THEME_JS)

    theme_btn.click(
        toggle_theme,
        inputs=[theme_value],
        outputs=[theme_value, theme_btn]
    ).then(None, inputs=[theme_value], js=APPLY_THEME_JS)

    # Calculator Events: disable the trigger, run one request, always re-enable
    take_home_btn.click(
        lambda: busy_button("Calculating..."), outputs=[take_home_btn], queue=False
    ).then(
        handle_take_home,
        inputs=[take_home_ctc, take_home_lakhs],
        outputs=[take_home_status, take_home_result]
    ).then(lambda: ready_button("Calculate"), outputs=[take_home_btn], queue=False)

    savings_btn.click(
        lambda: busy_button("Calculating..."), outputs=[savings_btn], queue=False
    ).then(
        handle_savings,
        inputs=[savings_ctc, savings_period, savings_expense, savings_lakhs],
        outputs=[savings_status, savings_result]
    ).then(lambda: ready_button("Calculate Savings"), outputs=[savings_btn], queue=False)

    range_btn.click(
        lambda: busy_button("Fetching..."), outputs=[range_btn], queue=False
    ).then(
        handle_savings_range,
        inputs=[range_min_ctc, range_min_lakhs, range_max_ctc, range_max_lakhs, range_expense, range_expense_lakhs],
        outputs=[range_status, range_table]
    ).then(lambda: ready_button("Show Savings Range"), outputs=[range_btn], queue=False)

    target_btn.click(
        lambda: busy_button("Generating..."), outputs=[target_btn], queue=False
    ).then(
        handle_time_to_target,
        inputs=[
            target_min_ctc, target_max_ctc, target_expense, target_amount, target_increment,
            target_investments, target_lumpsum, target_sip, target_cagr, target_lakhs
        ],
        outputs=[target_status, target_chart, target_table]
    ).then(lambda: ready_button("Generate Chart"), outputs=[target_btn], queue=False)

    reverse_btn.click(
        lambda: busy_button("Calculating..."), outputs=[reverse_btn], queue=False
    ).then(
        handle_reverse_ctc,
        inputs=[reverse_amount, reverse_period, reverse_lakhs],
        outputs=[reverse_status, reverse_result]
    ).then(lambda: ready_button("Calculate Required CTC"), outputs=[reverse_btn], queue=False)

    # Reverse calculator label follows the selected period
    reverse_period.change(
        lambda period: gr.update(label=f"Desired {period} Take-Home"),
        inputs=[reverse_period],
        outputs=[reverse_amount]
    )

# ========== APPLICATION LAUNCH ==========
if __name__ == "__main__":
    logger.info(f"🚀 Starting {APP_TITLE}...")
    logger.info(f"🔗 Calculation service: {tax_api.base_url}")
    logger.info(f"⏱️ Request timeout: {tax_api.timeout or 'none'}")

    try:
        demo.queue()
        demo.launch(
            server_name=config.SERVER_NAME,
            server_port=config.SERVER_PORT,
            share=False,
        )
    except Exception as e:
        logger.error(f"❌ Failed to launch application: {e}")
