from decimal import Decimal

from apps.ledger.money import round_money, to_cents, from_cents


class TestMoney:

    def test_round_half_up(self):
        assert round_money('0.005') == Decimal('0.01')
        assert round_money('2.675') == Decimal('2.68')
        assert round_money(Decimal('-1.005')) == Decimal('-1.01')

    def test_float_uses_its_repr(self):
        # Decimal(0.1) would carry the binary expansion
        assert round_money(0.1 + 0.2) == Decimal('0.30')

    def test_to_cents(self):
        assert to_cents(Decimal('12.34')) == 1234
        assert to_cents('40') == 4000
        assert to_cents(Decimal('0.00')) == 0

    def test_from_cents(self):
        assert from_cents(1234) == Decimal('12.34')
        assert from_cents(0) == Decimal('0.00')
        assert str(from_cents(5)) == '0.05'
