"""API routes for zakat calculation, classification and saved state."""
from dataclasses import replace
from datetime import datetime
from flask import Blueprint, jsonify, request, current_app

from zakat_engine.db import get_db
from zakat_engine.constants import (
    CALENDAR_RATES,
    CALENDAR_TYPES,
    ENTITY_TYPES,
    NISAB_GOLD_GRAMS,
    STATE_KEYS,
)
from zakat_engine.data.categories import get_fields_by_category
from zakat_engine.data.currencies import get_ordered_currencies, is_valid_currency, DEFAULT_CURRENCY
from zakat_engine.data.line_items import get_common_line_items
from zakat_engine.services.business import (
    add_line_item,
    answer_clarification,
    calculate_business_zakat,
    get_pending_clarifications,
    set_business_value,
    set_company_info,
    update_line_item,
)
from zakat_engine.services.calc import build_nisab_status, calculate_nisab_threshold
from zakat_engine.services.classifier import (
    classify_line_item,
    classify_line_items,
    clarification_kind,
    create_business_line_item,
)
from zakat_engine.services.errors import (
    ValidationError,
    require_choice,
    require_non_negative,
    require_number,
)
from zakat_engine.services.hawl import days_until_hawl, hawl_end_date, zakat_status
from zakat_engine.services.history import (
    add_history_entry,
    build_history_entry,
    clear_history,
    entries_by_year,
    get_history_entry,
    mark_paid,
    remove_history_entry,
)
from zakat_engine.services.individual import (
    calculate_individual_zakat,
    reset_calculator,
    set_asset_value,
    set_deduction_value,
)
from zakat_engine.services.ledger import add_entry, create_sub_entry, resolve_field
from zakat_engine.services.metals import add_gold_entry, create_gold_entry
from zakat_engine.services.models import (
    BUSINESS_VALUE_KEYS,
    BusinessAssets,
    CalculatorSettings,
    IndividualAssets,
    IndividualCalculatorState,
    IndividualDeductions,
)
from zakat_engine.services.state_store import (
    delete_state,
    load_business_state,
    load_history,
    load_individual_state,
    load_settings,
    save_business_state,
    save_history,
    save_individual_state,
    save_settings,
)
from zakat_engine.services.time_provider import get_today

api_bp = Blueprint('api', __name__)

STATE_STORES = ('individual', 'business', 'settings')


def _bad_request(e: Exception):
    current_app.logger.warning(f"Rejected {request.method} {request.path}: {e}")
    return jsonify({'error': str(e)}), 400


def _json_body() -> dict:
    body = request.get_json(silent=True)
    if body is None:
        if request.get_data():
            raise ValidationError('Request body must be valid JSON')
        return {}
    if not isinstance(body, dict):
        raise ValidationError('Request body must be a JSON object')
    return body


def _as_object(value, label: str) -> dict:
    if value is None:
        return {}
    if not isinstance(value, dict):
        raise ValidationError(f'{label} must be an object')
    return value


def _as_array(value, label: str) -> list:
    if value is None:
        return []
    if not isinstance(value, list):
        raise ValidationError(f'{label} must be a list')
    for item in value:
        if not isinstance(item, dict):
            raise ValidationError(f'Each item in {label} must be an object')
    return value


def _parse_base_currency(body: dict, default: str | None = None) -> str:
    code = body.get('base_currency', default or current_app.config['ZAKAT_BASE_CURRENCY'])
    if not is_valid_currency(code):
        raise ValidationError(f'Invalid currency: {code}')
    return code.upper()


def _default_settings() -> CalculatorSettings:
    return CalculatorSettings(
        gold_price_per_gram=current_app.config['ZAKAT_DEFAULT_GOLD_PRICE'],
        calendar_type=current_app.config['ZAKAT_DEFAULT_CALENDAR'],
        base_currency=current_app.config['ZAKAT_BASE_CURRENCY'],
    )


def _parse_settings(body: dict, defaults: CalculatorSettings | None = None) -> CalculatorSettings:
    """Rate inputs for one request. Missing values come from defaults (app config if not given)."""
    if defaults is None:
        defaults = _default_settings()
    gold_price = body.get('gold_price_per_gram', defaults.gold_price_per_gram)
    calendar_type = body.get('calendar_type', defaults.calendar_type)
    return CalculatorSettings(
        gold_price_per_gram=require_non_negative(gold_price, 'Gold price per gram'),
        calendar_type=require_choice(calendar_type, CALENDAR_TYPES, 'calendar type'),
        base_currency=_parse_base_currency(body, defaults.base_currency),
    )


def _calculation_settings(body: dict) -> CalculatorSettings:
    """With use_saved_state the saved settings replace app config as defaults."""
    if body.get('use_saved_state'):
        return _parse_settings(body, load_settings(get_db(), _default_settings()))
    return _parse_settings(body)


def _parse_date(value, label: str):
    if value is None:
        return None
    try:
        return datetime.strptime(value, '%Y-%m-%d').date()
    except (TypeError, ValueError):
        raise ValidationError(f'Invalid {label}. Use YYYY-MM-DD')


def _payload_id(raw: dict):
    """Client-supplied id of a saved entry, or None to generate one."""
    entry_id = raw.get('id')
    if entry_id is None:
        return None
    if not isinstance(entry_id, str) or not entry_id:
        raise ValidationError('id must be a non-empty string')
    return entry_id


def _build_sub_entry(key: str, raw: dict, base_currency: str):
    """Converted amount is always rebuilt from amount and exchange rate."""
    entry = create_sub_entry(
        key,
        raw.get('name', ''),
        raw.get('amount'),
        raw.get('currency', base_currency),
        raw.get('exchange_rate', 1.0),
        raw.get('description'),
    )
    entry_id = _payload_id(raw)
    if entry_id is not None:
        entry = replace(entry, id=entry_id)
    return entry


def _build_individual_assets(raw_fields, raw_gold, base_currency: str) -> IndividualAssets:
    """Run submitted fields, entries and gold through the reducers.

    A field is either a number (its total) or {"total": ...} or
    {"entries": [...]}; entries win over a total.
    """
    assets = IndividualAssets()
    for key, value in _as_object(raw_fields, 'fields').items():
        resolve_field(key)
        if isinstance(value, dict):
            entries = _as_array(value.get('entries'), f'{key} entries')
            for raw in entries:
                assets = add_entry(assets, key, _build_sub_entry(key, raw, base_currency))
            if not entries and 'total' in value:
                assets = set_asset_value(assets, key, value['total'])
        else:
            assets = set_asset_value(assets, key, value)

    for raw in _as_array(raw_gold, 'gold'):
        gold = create_gold_entry(raw.get('karat'), raw.get('weight_grams'), raw.get('price_per_gram'))
        gold_id = _payload_id(raw)
        if gold_id is not None:
            gold = replace(gold, id=gold_id)
        assets = add_gold_entry(assets, gold)
    return assets


def _build_deductions(raw_deductions) -> IndividualDeductions:
    deductions = IndividualDeductions()
    for key, value in _as_object(raw_deductions, 'deductions').items():
        deductions = set_deduction_value(deductions, key, value)
    return deductions


def _build_individual_state(body: dict, base_currency: str) -> IndividualCalculatorState:
    """Calculation request layout: fields, gold and deductions at the top level."""
    return IndividualCalculatorState(
        assets=_build_individual_assets(body.get('fields'), body.get('gold'), base_currency),
        deductions=_build_deductions(body.get('deductions')),
        base_currency=base_currency,
    )


def _build_saved_individual_state(body: dict) -> IndividualCalculatorState:
    """Saved layout, as returned by GET /state/individual."""
    base_currency = _parse_base_currency(body)
    assets = _as_object(body.get('assets'), 'assets')
    return IndividualCalculatorState(
        assets=_build_individual_assets(assets.get('fields'), assets.get('gold'), base_currency),
        deductions=_build_deductions(body.get('deductions')),
        base_currency=base_currency,
    )


def _build_business_assets(body: dict) -> BusinessAssets:
    company_name = body.get('company_name', '')
    industry_type = body.get('industry_type', '')
    if not isinstance(company_name, str) or not isinstance(industry_type, str):
        raise ValidationError('company_name and industry_type must be strings')
    assets = set_company_info(BusinessAssets(), company_name, industry_type)
    for key in BUSINESS_VALUE_KEYS:
        if key in body:
            assets = set_business_value(assets, key, body[key])

    for raw in _as_array(body.get('line_items'), 'line_items'):
        item = create_business_line_item(raw.get('name'), raw.get('amount', 0))
        item_id = _payload_id(raw)
        if item_id is not None:
            item = replace(item, id=item_id)
        assets = add_line_item(assets, item)
        if raw.get('classification') is not None:
            assets = update_line_item(assets, item.id, {'classification': raw['classification']})
        answer = raw.get('clarification_answer')
        if answer is not None:
            if not isinstance(answer, str):
                raise ValidationError('clarification_answer must be a string')
            assets = answer_clarification(assets, item.id, answer, raw.get('market_value'))
        elif raw.get('market_value') is not None:
            assets = update_line_item(assets, item.id, {'market_value': raw['market_value']})
    return assets


def _record_history(entity_type: str, result: dict, settings: CalculatorSettings) -> dict:
    entry = build_history_entry(
        entity_type=entity_type,
        total_assets=result['total_assets'],
        total_deductions=result['total_deductions'],
        net_wealth=result['net_wealth'],
        nisab_threshold=settings.nisab_threshold,
        zakat_due=result['zakat_due'],
        calendar_type=settings.calendar_type,
        currency=settings.base_currency,
    )
    db = get_db()
    save_history(db, add_history_entry(load_history(db), entry))
    return entry.to_dict()


def _clarification_prompts(assets: BusinessAssets) -> list[dict]:
    return [
        {
            'id': item.id,
            'name': item.name,
            'question': item.clarification_question,
            'kind': clarification_kind(item.clarification_question),
        }
        for item in get_pending_clarifications(assets)
    ]


@api_bp.route('/currencies')
def currencies():
    """Return the supported currencies, default first."""
    currency_list = get_ordered_currencies()
    return jsonify({
        'currencies': currency_list,
        'default': DEFAULT_CURRENCY,
        'count': len(currency_list),
    })


@api_bp.route('/categories')
def categories():
    """Return the asset fields grouped by category A to J."""
    return jsonify({'categories': get_fields_by_category()})


@api_bp.route('/nisab')
def nisab():
    """Return the nisab threshold for a gold price.

    Query Parameters:
        gold_price: Price per gram in the base currency (default: app config)
        net_wealth: Optional; when given, the nisab status is included
    """
    try:
        gold_price = float(request.args.get('gold_price', current_app.config['ZAKAT_DEFAULT_GOLD_PRICE']))
        net_wealth = request.args.get('net_wealth')
        net_wealth = float(net_wealth) if net_wealth is not None else None
    except ValueError:
        return jsonify({'error': 'gold_price and net_wealth must be numbers'}), 400

    try:
        threshold = calculate_nisab_threshold(gold_price)
        response = {
            'gold_grams': NISAB_GOLD_GRAMS,
            'gold_price_per_gram': gold_price,
            'threshold': round(threshold, 2),
            'rates': CALENDAR_RATES,
        }
        if net_wealth is not None:
            response['status'] = build_nisab_status(require_number(net_wealth, 'Net wealth'), threshold)
    except ValidationError as e:
        return _bad_request(e)
    return jsonify(response)


@api_bp.route('/calculate/individual', methods=['POST'])
def calculate_individual():
    """Calculate zakat for an individual.

    Request body:
    {
        "base_currency": "USD",
        "calendar_type": "islamic",
        "gold_price_per_gram": 70.0,
        "fields": {
            "cash_on_hand": 1500,
            "trading_stocks": {"entries": [{"name": "ETF", "amount": 1000, "currency": "EUR", "exchange_rate": 1.1}]},
            "oil": 500
        },
        "gold": [{"karat": "21k", "weight_grams": 20, "price_per_gram": 70}],
        "deductions": {"urgent_debts": 500},
        "use_saved_state": false,
        "record": false
    }

    With use_saved_state the saved individual calculator is used instead of
    fields/gold/deductions, and the saved settings supply any rate input the
    body leaves out. With record the result is appended to history.
    """
    try:
        body = _json_body()
        settings = _calculation_settings(body)
        if body.get('use_saved_state'):
            state = load_individual_state(get_db())
        else:
            state = _build_individual_state(body, settings.base_currency)
        result = calculate_individual_zakat(state, settings)
        if body.get('record'):
            result['history_entry'] = _record_history('personal', result, settings)
    except ValidationError as e:
        return _bad_request(e)
    return jsonify(result)


@api_bp.route('/calculate/business', methods=['POST'])
def calculate_business():
    """Calculate zakat for a company balance sheet.

    Request body:
    {
        "company_name": "Acme", "industry_type": "Retail",
        "cash": 10000, "receivables": 0, "inventory": 5000, "investments": 0,
        "line_items": [
            {"name": "Accounts Payable", "amount": 2000},
            {"name": "Equipment", "amount": 8000, "clarification_answer": "operations"}
        ],
        "gold_price_per_gram": 70.0,
        "calendar_type": "islamic",
        "record": false
    }

    Line items are classified by name; an explicit classification or a
    clarification_answer (with optional market_value) overrides that.
    use_saved_state works as for individual calculations.
    """
    try:
        body = _json_body()
        settings = _calculation_settings(body)
        if body.get('use_saved_state'):
            assets = load_business_state(get_db())
        else:
            assets = _build_business_assets(body)
        result = calculate_business_zakat(assets, settings)
        result['clarifications'] = _clarification_prompts(assets)
        if body.get('record'):
            history_result = {
                'total_assets': result['total_zakatable'],
                'total_deductions': result['total_deductible'],
                'net_wealth': result['net_wealth'],
                'zakat_due': result['zakat_due'],
            }
            result['history_entry'] = _record_history('company', history_result, settings)
    except ValidationError as e:
        return _bad_request(e)
    return jsonify(result)


@api_bp.route('/classify', methods=['POST'])
def classify():
    """Classify balance-sheet line names.

    Accepts {"name": "Accounts Payable"} for one name or
    {"items": [{"name": ..., "amount": ...}, ...]} for imported rows.
    """
    try:
        body = _json_body()
        if 'items' in body:
            rows = [
                {'name': row.get('name'), 'amount': row.get('amount', 0)}
                for row in _as_array(body['items'], 'items')
            ]
            items = classify_line_items(rows)
            return jsonify({
                'items': [
                    {**item.to_dict(), 'clarification_kind': clarification_kind(item.clarification_question)}
                    for item in items
                ],
                'count': len(items),
            })

        name = body.get('name')
        if not isinstance(name, str) or not name.strip():
            raise ValidationError('name is required')
    except ValidationError as e:
        return _bad_request(e)

    result = classify_line_item(name)
    result['name'] = name
    result['clarification_kind'] = clarification_kind(result['clarification_question'])
    return jsonify(result)


@api_bp.route('/line-items/common')
def common_line_items():
    """Return the common balance-sheet rows, optionally for one category."""
    category = request.args.get('category')
    if category is not None and category not in ('asset', 'liability'):
        return jsonify({'error': f'Invalid category: {category}'}), 400
    items = get_common_line_items(category)
    return jsonify({'line_items': items, 'count': len(items)})


@api_bp.route('/hawl', methods=['POST'])
def hawl():
    """Return the hawl end date and payment status.

    Request body:
    {
        "hawl_start": "2025-03-01",
        "net_wealth": 12000,
        "gold_price_per_gram": 70.0,
        "calendar_type": "islamic",
        "last_payment_date": null
    }
    """
    try:
        body = _json_body()
        settings = _parse_settings(body)
        hawl_start = _parse_date(body.get('hawl_start'), 'hawl_start')
        last_payment = _parse_date(body.get('last_payment_date'), 'last_payment_date')
        net_wealth = require_number(body.get('net_wealth', 0), 'Net wealth')
    except ValidationError as e:
        return _bad_request(e)

    today = get_today()
    response = {
        'today': today.isoformat(),
        'calendar_type': settings.calendar_type,
        'status': zakat_status(
            net_wealth,
            settings.nisab_threshold,
            hawl_start,
            today,
            last_payment_date=last_payment,
            calendar_type=settings.calendar_type,
        ),
        'hawl_end': None,
        'days_remaining': None,
    }
    if hawl_start is not None:
        response['hawl_end'] = hawl_end_date(hawl_start, settings.calendar_type).isoformat()
        response['days_remaining'] = days_until_hawl(hawl_start, today, settings.calendar_type)
    return jsonify(response)


@api_bp.route('/history', methods=['GET'])
def history_list():
    """Return recorded calculations, newest first.

    Query Parameters:
        year: Optional Gregorian year filter
    """
    history = load_history(get_db())
    year = request.args.get('year')
    if year is not None:
        try:
            history = entries_by_year(history, int(year))
        except ValueError:
            return jsonify({'error': 'year must be an integer'}), 400
    return jsonify({'entries': [e.to_dict() for e in history], 'count': len(history)})


@api_bp.route('/history', methods=['POST'])
def history_add():
    """Record a finished calculation supplied by the client."""
    try:
        body = _json_body()
        settings = _parse_settings(body)
        entity_type = require_choice(body.get('entity_type', 'personal'), ENTITY_TYPES, 'entity type')
        nisab_threshold = body.get('nisab_threshold', settings.nisab_threshold)
        entry = build_history_entry(
            entity_type=entity_type,
            total_assets=require_non_negative(body.get('total_assets'), 'Total assets'),
            total_deductions=require_non_negative(body.get('total_deductions', 0), 'Total deductions'),
            net_wealth=require_number(body.get('net_wealth'), 'Net wealth'),
            nisab_threshold=require_non_negative(nisab_threshold, 'Nisab threshold'),
            zakat_due=require_non_negative(body.get('zakat_due'), 'Zakat due'),
            calendar_type=settings.calendar_type,
            currency=settings.base_currency,
        )
    except ValidationError as e:
        return _bad_request(e)

    db = get_db()
    save_history(db, add_history_entry(load_history(db), entry))
    return jsonify(entry.to_dict()), 201


@api_bp.route('/history', methods=['DELETE'])
def history_clear():
    db = get_db()
    save_history(db, clear_history(load_history(db)))
    current_app.logger.info("Cleared zakat history")
    return jsonify({'entries': [], 'count': 0})


@api_bp.route('/history/<entry_id>', methods=['DELETE'])
def history_remove(entry_id):
    db = get_db()
    history = load_history(db)
    if get_history_entry(history, entry_id) is None:
        return jsonify({'error': f'History entry not found: {entry_id}'}), 404
    save_history(db, remove_history_entry(history, entry_id))
    return jsonify({'removed': entry_id})


@api_bp.route('/history/<entry_id>/paid', methods=['POST'])
def history_mark_paid(entry_id):
    """Set the paid flag of one entry. Body: {"paid": true} (default true)."""
    try:
        body = _json_body()
    except ValidationError as e:
        return _bad_request(e)
    paid = body.get('paid', True)
    if not isinstance(paid, bool):
        return jsonify({'error': 'paid must be a boolean'}), 400

    db = get_db()
    history = load_history(db)
    if get_history_entry(history, entry_id) is None:
        return jsonify({'error': f'History entry not found: {entry_id}'}), 404
    history = mark_paid(history, entry_id, paid)
    save_history(db, history)
    return jsonify(get_history_entry(history, entry_id).to_dict())


@api_bp.route('/state/<store>', methods=['GET'])
def state_get(store):
    """Return a saved calculator store (individual, business or settings)."""
    if store not in STATE_STORES:
        return jsonify({'error': f'Unknown store: {store}'}), 404
    db = get_db()
    if store == 'individual':
        state = load_individual_state(db)
    elif store == 'business':
        state = load_business_state(db)
    else:
        state = load_settings(db, _default_settings())
    return jsonify({'key': STATE_KEYS[store], 'state': state.to_dict()})


@api_bp.route('/state/<store>', methods=['PUT'])
def state_put(store):
    """Replace a saved calculator store.

    The body uses the layout GET returns and goes through the same checks as
    a calculation request; nothing is saved when any value is rejected.
    Missing fields take defaults.
    """
    if store not in STATE_STORES:
        return jsonify({'error': f'Unknown store: {store}'}), 404
    try:
        body = _json_body()
        if store == 'individual':
            state = _build_saved_individual_state(body)
        elif store == 'business':
            state = _build_business_assets(body)
        else:
            state = _parse_settings(body)
    except ValidationError as e:
        return _bad_request(e)

    db = get_db()
    if store == 'individual':
        save_individual_state(db, state)
    elif store == 'business':
        save_business_state(db, state)
    else:
        save_settings(db, state)
    return jsonify({'key': STATE_KEYS[store], 'state': state.to_dict()})


@api_bp.route('/state/<store>', methods=['DELETE'])
def state_reset(store):
    """Reset a saved store. The individual calculator keeps its base currency."""
    if store not in STATE_STORES:
        return jsonify({'error': f'Unknown store: {store}'}), 404
    db = get_db()
    if store == 'individual':
        save_individual_state(db, reset_calculator(load_individual_state(db)))
    else:
        delete_state(db, STATE_KEYS[store])
    return jsonify({'key': STATE_KEYS[store], 'reset': True})
