from sme_valuation.domain.types import ValueDriver
from sme_valuation.sectors.registry import default_registry
from sme_valuation.sectors.value_drivers import recommend_value_drivers
from sme_valuation.sectors.value_drivers import top_value_drivers


class TestRecommendValueDrivers:
  """Tests for recommend_value_drivers function."""

  def test_every_sector_has_drivers(self):
    for sector in default_registry().sectors():
      drivers = recommend_value_drivers(sector)
      assert len(drivers) == 6
      assert all(d.impact > 0 for d in drivers)

  def test_table_order(self):
    drivers = recommend_value_drivers('retail')

    assert drivers[0] == ValueDriver(
        'Improve financial record quality & formalize accounting', 15)
    assert drivers[-1] == ValueDriver('Expand into adjacent locations', 12)

  def test_unknown_sector(self):
    assert recommend_value_drivers('mining') == ()

  def test_custom_table(self):
    table = {'widgets': [ValueDriver('Automate assembly', 9)]}

    assert recommend_value_drivers('widgets', table) == (ValueDriver(
        'Automate assembly', 9),)
    assert recommend_value_drivers('retail', table) == ()


class TestTopValueDrivers:
  """Tests for top_value_drivers function."""

  def test_retail_top_three(self):
    """15% first, then the two 12% drivers in table order."""
    actions = [d.action for d in top_value_drivers('retail')]

    assert actions == [
        'Improve financial record quality & formalize accounting',
        'Reduce dependency on owner/founder',
        'Expand into adjacent locations',
    ]

  def test_tech_top_driver(self):
    top = top_value_drivers('tech', n=1)

    assert top == (ValueDriver('Grow monthly recurring revenue (MRR)', 20),)

  def test_unknown_sector(self):
    assert top_value_drivers('mining') == ()
