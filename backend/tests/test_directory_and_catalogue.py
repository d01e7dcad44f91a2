"""
UserDirectory and PlaceCatalogue: registration, lookups and nearby search.
"""
import pytest

from modules.errors import InvalidRecord, NotFound, UsernameTaken
from schemas.user import Role


class TestUserDirectory:

    def test_register_guide_with_profile(self, guide):
        assert guide.role == Role.guide
        assert guide.is_guide
        assert guide.guide_profile.location == "Pune"
        assert guide.guide_profile.languages == ["Marathi", "Hindi", "English"]
        assert guide.summary().contact == "rohan@example.com"

    def test_register_strips_whitespace(self, services):
        user = services.users.register("  neha ", " Neha ", " n@x ", "tourist")
        assert (user.username, user.full_name, user.email) == ("neha", "Neha", "n@x")
        assert user.phone is None

    def test_duplicate_username(self, services, tourist):
        with pytest.raises(UsernameTaken):
            services.users.register("asha", "Another Asha", "other@example.com", "tourist")

    def test_invalid_role(self, services):
        with pytest.raises(InvalidRecord):
            services.users.register("x", "X", "x@x", "admin")

    def test_get_and_find(self, services, tourist):
        assert services.users.get(tourist.id).username == "asha"
        assert services.users.find("ghost") is None
        with pytest.raises(NotFound):
            services.users.get("ghost")

    def test_list_guides_only(self, services, tourist, guide, other_guide):
        assert [g.username for g in services.users.list_guides()] == ["meera", "rohan"]

    def test_update_location_validates(self, services, tourist):
        with pytest.raises(InvalidRecord):
            services.users.update_location(tourist.id, 120.0, 0.0)
        with pytest.raises(NotFound):
            services.users.update_location("ghost", 10.0, 10.0)

    def test_nearby_guides(self, services, guide, other_guide, tourist):
        services.users.update_location(guide.id, 18.5204, 73.8567)
        services.users.update_location(other_guide.id, 19.0760, 72.8777)
        services.users.update_location(tourist.id, 18.5210, 73.8570)

        hits = services.users.nearby_guides(18.52, 73.85, radius_km=5)
        assert [h.item.id for h in hits] == [guide.id]

        both = services.users.nearby_guides(18.52, 73.85, radius_km=200)
        assert [h.item.id for h in both] == [guide.id, other_guide.id]

    def test_guides_without_location_are_skipped(self, services, guide):
        assert services.users.nearby_guides(18.52, 73.85, radius_km=20000) == []

    def test_non_numeric_rating_is_invalid_record(self, services):
        with pytest.raises(InvalidRecord) as exc_info:
            services.users.register(
                "kiran", "Kiran", "k@x", "guide",
                guide_profile={"location": "Nashik", "rating": "great"},
            )
        assert exc_info.value.errors == ["guide_profile.rating='great' must be numeric"]
        assert services.users.list_guides() == []


class TestProfileUpdates:

    def test_update_account_fields(self, services, tourist):
        updated = services.users.update_user(tourist.id, {"full_name": " Asha K ", "phone": ""})
        assert updated.full_name == "Asha K"
        assert updated.phone is None
        assert updated.email == "asha@example.com"
        assert services.users.get(tourist.id).full_name == "Asha K"

    def test_username_and_role_are_not_updatable(self, services, tourist):
        with pytest.raises(InvalidRecord) as exc_info:
            services.users.update_user(tourist.id, {"username": "x", "role": "guide"})
        assert exc_info.value.errors == ["role cannot be updated", "username cannot be updated"]
        assert services.users.get(tourist.id).role == Role.tourist

    def test_blank_email_rejected(self, services, tourist):
        with pytest.raises(InvalidRecord):
            services.users.update_user(tourist.id, {"email": "  "})

    def test_unknown_user(self, services):
        with pytest.raises(NotFound):
            services.users.update_user("ghost", {"full_name": "Ghost"})

    def test_guide_profile_merge_keeps_other_fields(self, services, guide):
        updated = services.users.update_guide_profile(guide.id, {"bio": "Forts and food.", "rating": 4.9})
        profile = updated.guide_profile
        assert profile.bio == "Forts and food."
        assert profile.rating == 4.9
        assert profile.location == "Pune"
        assert profile.languages == ["Marathi", "Hindi", "English"]

    def test_guide_without_profile_needs_location(self, services, other_guide):
        with pytest.raises(InvalidRecord):
            services.users.update_guide_profile(other_guide.id, {"bio": "Mumbai food walks"})
        created = services.users.update_guide_profile(
            other_guide.id, {"location": "Mumbai", "bio": "Mumbai food walks"},
        )
        assert created.guide_profile.location == "Mumbai"
        assert created.guide_profile.experience_years == 0

    def test_profile_update_validates(self, services, guide):
        with pytest.raises(InvalidRecord):
            services.users.update_guide_profile(guide.id, {"rating": "great"})
        with pytest.raises(InvalidRecord):
            services.users.update_guide_profile(guide.id, {"hourly_rate": 500})
        assert services.users.get(guide.id).guide_profile.rating == 4.7

    def test_tourists_have_no_guide_profile(self, services, tourist):
        with pytest.raises(NotFound):
            services.users.update_guide_profile(tourist.id, {"location": "Pune"})


class TestPlaceCatalogue:

    @pytest.fixture
    def places(self, services):
        catalogue = services.places
        catalogue.add("Shaniwar Wada", "Attraction", "Pune", 18.5195, 73.8553)
        catalogue.add("Sinhagad Fort", "attraction", "Pune", 18.3664, 73.7559)
        catalogue.add("Vaishali", "restaurant", "Pune", 18.5211, 73.8412)
        catalogue.add("Gateway of India", "attraction", "Mumbai", 18.9220, 72.8347)
        return catalogue

    def test_category_is_normalised(self, places):
        assert {p.category for p in places.list()} == {"attraction", "restaurant"}
        assert len(places.list("ATTRACTION")) == 3

    def test_get_missing(self, places):
        with pytest.raises(NotFound):
            places.get("missing")

    def test_rejects_bad_coordinates(self, services):
        with pytest.raises(InvalidRecord):
            services.places.add("Nowhere", "attraction", "Nowhere", 0.0, 0.0)

    def test_nearby_nearest_first_with_category(self, places):
        hits = places.nearby(18.5204, 73.8567, radius_km=5)
        assert [h.item.name for h in hits] == ["Shaniwar Wada", "Vaishali"]

        attractions = places.nearby(18.5204, 73.8567, radius_km=30, category="attraction")
        assert [h.item.name for h in attractions] == ["Shaniwar Wada", "Sinhagad Fort"]
        assert attractions[0].distance_km < attractions[1].distance_km

    def test_nearby_default_radius(self, places, monkeypatch):
        import config
        monkeypatch.setattr(config, "NEARBY_DEFAULT_RADIUS_KM", 1.0)
        assert [h.item.name for h in places.nearby(18.5204, 73.8567)] == ["Shaniwar Wada"]
