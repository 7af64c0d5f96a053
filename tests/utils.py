from signage_scheduler.core.security import create_access_token, create_player_token


def user_headers(*, customer_id: int, role: str = "Admin", user_id: int = 1) -> dict[str, str]:
    token = create_access_token(user_id=user_id, customer_id=customer_id, role=role)
    return {"Authorization": f"Bearer {token}"}


def player_headers(*, player_id: int, site_id: int, customer_id: int) -> dict[str, str]:
    token = create_player_token(player_id=player_id, site_id=site_id, customer_id=customer_id)
    return {"Authorization": f"Bearer {token}"}
