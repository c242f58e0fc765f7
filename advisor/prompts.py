from core.metrics import month_end_projection


def _money(value) -> str:
    return f"${float(value):,.2f}"


def _expense_lines(expenses, limit=40) -> str:
    lines = []
    for e in expenses[-limit:]:
        line = f"- {e.timestamp[:10]} | {e.category} | {e.description} | {_money(e.amount)}"
        if e.is_recurring:
            line += f" | recurring {e.frequency or 'Yearly'}"
        if e.sentiment:
            line += f" | felt {e.sentiment}"
        if e.note:
            line += f" | note: {e.note}"
        lines.append(line)
    return "\n".join(lines) or "- (no expenses recorded)"


def financial_summary(snapshot) -> str:
    s, m = snapshot.settings, snapshot.metrics
    return (
        f"- Period: {s.period}\n"
        f"- Monthly Income: {_money(s.income)}\n"
        f"- Budget Limit (Spending Goal): {_money(s.amount)}\n"
        f"- Rollover From Last Month: {_money(m.rollover)}\n"
        f"- Total Available To Spend: {_money(m.total_available)}\n"
        f"- Actual Spending: {_money(m.total_spent)}\n"
        f"- Remaining Budget: {_money(m.remaining_budget)}\n"
        f"- Net Savings (Income - Spent): {_money(m.net_surplus)}\n"
        f"- Savings Rate: {m.savings_rate:.1f}%"
    )


def insight(snapshot) -> str:
    return f"""
Analyze this user's monthly financial performance:
{financial_summary(snapshot)}

Task: Provide one supportive, behavioral financial insight based on their savings rate and budget adherence.
Guidelines:
- Use plain English.
- Focus on the balance between income and spending.
- Keep it short (max 2 sentences).
"""


def subscription_audit(snapshot) -> str:
    return f"""
These are the user's recurring costs this month:
{_expense_lines(snapshot.recurring)}
Annualized recurring cost: {_money(snapshot.metrics.annualized_recurring_cost)}

Task: Point out the subscriptions most worth cancelling or renegotiating. Max 2 sentences.
"""


def forecast(snapshot) -> str:
    projected = month_end_projection(snapshot.metrics.total_spent, snapshot.now)
    return f"""
{financial_summary(snapshot)}
- Day Of Month: {snapshot.now.day}
- Projected Month-End Spending At Current Pace: {_money(projected)}

Task: Forecast whether the user will stay within their available budget this month and say what to adjust.
Keep it to 2 sentences.
"""


def wealth_score(snapshot) -> str:
    goal = snapshot.goal
    goal_line = f"- Savings Goal: {goal.title}, target {_money(goal.target_amount)} by {goal.deadline}" if goal else "- No savings goal"
    return f"""
{financial_summary(snapshot)}
{goal_line}

Task: Rate this user's financial health.
Return JSON: {{"score": 0-100 integer, "label": short verdict, "color": hex colour, "advice": one sentence}}
"""


def anomalies(snapshot) -> str:
    return f"""
Budget limit: {_money(snapshot.settings.amount)}
Expenses this month:
{_expense_lines(snapshot.period_expenses)}

Task: Detect unusual or risky spending (spikes, duplicates, categories over pace).
Return a JSON array of at most 3 items: [{{"title": str, "message": str, "severity": "low"|"medium"|"high"}}]
Return [] if nothing stands out.
"""


def freedom_horizon(snapshot) -> str:
    return f"""
{financial_summary(snapshot)}

Task: Project when this user reaches financial milestones (emergency fund, debt free, financial independence)
if they keep their current savings rate.
Return JSON: {{"summary": str, "milestones": [{{"title": str, "eta": str, "confidence": "Low"|"Medium"|"High"}}]}}
"""


def value_audit(snapshot) -> str:
    return f"""
Each expense is tagged with how the user felt about it:
{_expense_lines([e for e in snapshot.period_expenses if e.sentiment])}

Task: In 2 sentences, tell the user where their money buys happiness and where it buys regret.
"""


def savings_quest(snapshot) -> str:
    return f"""
Expenses this month:
{_expense_lines(snapshot.period_expenses)}

Task: Invent one short, concrete savings challenge for the coming week based on these habits.
Return JSON: {{"title": str, "description": str, "target_saving": number, "duration_days": integer,
"difficulty": "Easy"|"Medium"|"Hard"}}
"""


def persona(snapshot) -> str:
    return f"""
Expenses this month:
{_expense_lines(snapshot.period_expenses)}

Task: Classify this user's spending personality.
Return JSON: {{"name": str, "icon": single emoji, "description": str, "strength": str, "watch_out": str}}
"""


def goal_strategy(snapshot) -> str:
    goal = snapshot.goal
    return f"""
{financial_summary(snapshot)}
Savings goal: "{goal.title}", target {_money(goal.target_amount)}, deadline {goal.deadline}.
Today is {snapshot.now.date().isoformat()}.

Task: Give a daily safe-to-spend amount and one tactic to reach the goal on time. Max 2 sentences.
"""


def category_optimization(snapshot, categories) -> str:
    totals = snapshot.metrics.category_totals
    current = "\n".join(f"- {c}: spent {_money(totals.get(c, 0))}" for c in categories)
    return f"""
The user has a total monthly spending limit of {_money(snapshot.settings.amount)}.
Spending by category this month:
{current}

Task: Split the limit into per-category caps. The caps must not add up to more than the limit.
Return JSON: {{"suggested_limits": [{{"category": str, "limit": number}}], "rationale": one sentence}}
"""


def market_savings(top_category: str) -> str:
    return (
        f'Find specific ways or local deals to save money on "{top_category}" expenses. '
        "Focus on recent news, discount sites, or trending saving hacks for this year."
    )


def chat_instruction(snapshot) -> str:
    return f"""
You are Freedom Assistant, a friendly budgeting coach. Answer using the user's data below.
Be concise and specific.

{financial_summary(snapshot)}
All recorded expenses:
{_expense_lines(snapshot.all_expenses, limit=100)}
"""
