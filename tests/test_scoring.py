from resource_locator.scoring import is_relevant, score_relevance


def _place(name, types=None):
    return {"name": name, "types": types or []}


def test_clinic_scores_positive():
    place = _place("Children's Developmental Pediatrics Clinic", ["doctor"])
    # children/pediatric +4, doctor +3
    assert score_relevance(place) == 7
    assert is_relevant(place)


def test_gas_station_is_irrelevant():
    place = _place("Joe's Gas Station", ["gas_station"])
    assert score_relevance(place) == -5
    assert not is_relevant(place)


def test_each_rule_fires_once():
    place = _place("Down Syndrome Developmental Disabilities Association", [])
    assert score_relevance(place) == 10


def test_name_rules_are_additive_and_case_insensitive():
    place = _place("ADAPTIVE Special Needs Pediatric Program", [])
    assert score_relevance(place) == 6 + 8 + 4


def test_type_rules():
    assert score_relevance(_place("Center", ["health", "hospital"])) == 3
    assert score_relevance(_place("Center", ["primary_school"])) == 3
    assert score_relevance(_place("Center", ["community_center"])) == 2
    assert score_relevance(_place("Center", ["convenience_store"])) == -5


def test_chain_denylist():
    assert score_relevance(_place("Planet Fitness", ["gym", "health"])) == -5 + 3
    assert score_relevance(_place("Starbucks", ["cafe"])) == -10


def test_unknown_place_scores_zero_and_is_irrelevant():
    assert score_relevance(_place("Acme Corp", ["establishment"])) == 0
    assert not is_relevant({"name": None, "types": None})


def test_custom_rule_tables():
    rules = [(("autism",), 5)]
    assert score_relevance(_place("Autism Center"), name_rules=rules, type_rules=[]) == 5
