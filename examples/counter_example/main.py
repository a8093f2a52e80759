import logging

from counter_duck import counter_duck, bounded_counter_duck

if __name__ == "__main__":
    logging.basicConfig(level=logging.DEBUG, format="%(name)s %(levelname)s %(message)s")

    print("\n==== 基本 duck ====")
    print(counter_duck)
    state = counter_duck.reducer(None, counter_duck.creators.increment())
    state = counter_duck.reducer(state, counter_duck.creators.increment_by(5))
    print(f"計數: {counter_duck.selectors.count(state)}，偶數: {counter_duck.selectors.is_even(state)}")
    state = counter_duck.reducer(state, counter_duck.creators.reset())
    print(f"重置後: {state}")

    print("\n==== 繼承後的 duck ====")
    print(bounded_counter_duck)
    print(f"types: {dict(bounded_counter_duck.types)}")
    state = bounded_counter_duck.reducer(None, bounded_counter_duck.creators.increment_by(99))
    state = bounded_counter_duck.reducer(state, bounded_counter_duck.creators.decrement())
    print(f"計數: {bounded_counter_duck.selectors.count(state)}")

    print("\n==== 父 duck 不受影響 ====")
    print(f"types: {dict(counter_duck.types)}")
    print(f"initial_state: {counter_duck.initial_state}")
